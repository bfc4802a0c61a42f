#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 18:27:40 krylon>
#
# /data/code/python/pyipscan/test_nexus.py
# created on 14. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.test_nexus

(c) 2026 Benjamin Walkenhorst
"""

import os
import shutil
import unittest
from datetime import datetime, timedelta
from typing import Final

from pyipscan import common
from pyipscan.addrrange import FamilyMismatch, InvalidAddress
from pyipscan.model import ConfigError, ResolvedRecord, ScanConfig
from pyipscan.nexus import Nexus
from pyipscan.prober import ICMPTransport
from pyipscan.resolver import NameResolver
from pyipscan.test_prober import FakeTransport
from pyipscan.test_resolver import FakeResolver

test_dir: Final[str] = os.path.join(
    "/tmp",
    datetime.now().strftime(f"{common.AppName.lower()}_test_nexus_%Y%m%d_%H%M%S"))

timeout: Final[timedelta] = timedelta(milliseconds=50)


class TestNexus(unittest.TestCase):
    """Run complete scans against fake networks."""

    @classmethod
    def setUpClass(cls) -> None:
        """Prepare the testing environment."""
        common.set_basedir(test_dir)

    @classmethod
    def tearDownClass(cls) -> None:
        """Clean up afterwards."""
        shutil.rmtree(test_dir, ignore_errors=True)

    def test_01_two_hosts(self) -> None:
        """Two hosts answer right away and have names."""
        cfg: Final[ScanConfig] = ScanConfig(start="10.0.0.1", end="10.0.0.2", timeout=timeout)
        t: Final[FakeTransport] = FakeTransport(script={
            "10.0.0.2": {0: [7]},
            "10.0.0.1": {0: [2]},
        })
        res: Final[NameResolver] = NameResolver(res=FakeResolver({
            "10.0.0.1": ["a.local"],
            "10.0.0.2": ["b.local"],
        }, jitter=0.01))
        nx: Final[Nexus] = Nexus(cfg=cfg, transport=t, resolver=res)

        result: Final[list[ResolvedRecord]] = nx.run()

        self.assertEqual([str(r.addr) for r in result], ["10.0.0.1", "10.0.0.2"])
        self.assertEqual([r.millis for r in result], [2, 7])
        self.assertEqual([r.names for r in result], [("a.local", ), ("b.local", )])

        lines: Final[list[str]] = nx.render(result).splitlines()
        self.assertEqual(lines[1], "2 devices found")
        self.assertEqual(lines[3], f"{'10.0.0.1 2ms':<25}\t--> a.local")
        self.assertEqual(lines[4], f"{'10.0.0.2 7ms':<25}\t--> b.local")

    def test_02_silent_host(self) -> None:
        """A host that never answers does not show up in the report."""
        cfg: Final[ScanConfig] = ScanConfig(start="10.0.0.1",
                                            end="10.0.0.3",
                                            timeout=timeout,
                                            rounds=3)
        t: Final[FakeTransport] = FakeTransport(script={
            "10.0.0.1": {0: [2]},
            "10.0.0.3": {1: [4]},
        })
        res: Final[NameResolver] = NameResolver(res=FakeResolver({
            "10.0.0.1": ["a.local"],
            "10.0.0.3": ["c.local"],
        }))
        nx: Final[Nexus] = Nexus(cfg=cfg, transport=t, resolver=res)

        result: Final[list[ResolvedRecord]] = nx.run()
        text: Final[str] = nx.render(result)

        self.assertEqual([str(r.addr) for r in result], ["10.0.0.1", "10.0.0.3"])
        self.assertIn("2 devices found", text)
        self.assertNotIn("10.0.0.2", text)
        self.assertIn(f"{'10.0.0.3 54ms':<25}\t--> c.local", text)

    def test_03_quiet(self) -> None:
        """A quiet scan has no banner."""
        cfg: Final[ScanConfig] = ScanConfig(start="10.0.0.1",
                                            end="10.0.0.1",
                                            timeout=timeout,
                                            quiet=True)
        t: Final[FakeTransport] = FakeTransport(script={"10.0.0.1": {0: [1]}})
        res: Final[NameResolver] = NameResolver(res=FakeResolver({"10.0.0.1": []}))
        nx: Final[Nexus] = Nexus(cfg=cfg, transport=t, resolver=res)

        text: Final[str] = nx.render(nx.run())

        self.assertNotIn("devices found", text)
        self.assertEqual(text, f"{'10.0.0.1 1ms':<25}\t--> <undefined>\n\n")

    def test_04_bad_config(self) -> None:
        """Invalid configurations are rejected before anything happens."""
        with self.assertRaises(InvalidAddress):
            Nexus(cfg=ScanConfig(start="10.0.0.300", end="10.0.1.1"))

        with self.assertRaises(FamilyMismatch):
            Nexus(cfg=ScanConfig(start="10.0.0.1", end="fe80::1"))

        with self.assertRaises(ConfigError):
            ScanConfig(start="10.0.0.1", end="10.0.0.2", rounds=0)

        with self.assertRaises(ConfigError):
            ScanConfig(start="10.0.0.1", end="10.0.0.2", timeout=timedelta(0))

        with self.assertRaises(ConfigError):
            ScanConfig(start="10.0.0.1", end="10.0.0.2", quiet=True, debug=True)

    def test_05_default_transport(self) -> None:
        """Without a Transport, the Nexus creates one that fits the range."""
        res: Final[NameResolver] = NameResolver(res=FakeResolver({}))

        nx: Nexus = Nexus(cfg=ScanConfig(start="2001:db8::1", end="2001:db8::4", udp=True),
                          resolver=res)
        self.assertIsInstance(nx.transport, ICMPTransport)
        assert isinstance(nx.transport, ICMPTransport)
        self.assertEqual(nx.transport.family, 6)
        self.assertFalse(nx.transport.privileged)

        nx = Nexus(cfg=ScanConfig(start="10.0.0.1", end="10.0.0.4"), resolver=res)
        assert isinstance(nx.transport, ICMPTransport)
        self.assertEqual(nx.transport.family, 4)
        self.assertTrue(nx.transport.privileged)


# Local Variables: #
# python-indent: 4 #
# End: #
