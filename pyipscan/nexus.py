#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 18:12:27 krylon>
#
# /data/code/python/pyipscan/nexus.py
# created on 12. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.nexus

(c) 2026 Benjamin Walkenhorst
"""

import logging
from dataclasses import dataclass, field
from typing import Final, Optional

from pyipscan import common, report
from pyipscan.addrrange import AddressRange
from pyipscan.model import ProbeRecord, ResolvedRecord, ScanConfig
from pyipscan.prober import EchoTransport, ICMPTransport, ProbeScheduler
from pyipscan.resolver import NameResolver, ResolutionFanout


@dataclass(kw_only=True, slots=True)
class Nexus:
    """Nexus brings together all the moving parts, so to speak."""

    cfg: ScanConfig
    log: logging.Logger = field(default_factory=lambda: common.get_logger("nexus"))
    transport: Optional[EchoTransport] = None
    resolver: Optional[NameResolver] = None
    addrs: AddressRange = field(init=False)

    def __post_init__(self) -> None:
        self.addrs = AddressRange(start=self.cfg.start, end=self.cfg.end)
        if self.transport is None:
            self.transport = ICMPTransport.create(self.cfg.transport, self.addrs.family)
        if self.resolver is None:
            self.resolver = NameResolver(nameservers=self.cfg.nameservers)

    def run(self) -> list[ResolvedRecord]:
        """Scan the address range and return the report."""
        self.log.info("Scan of %s - %s (%d addresses) started",
                      self.addrs.start,
                      self.addrs.end,
                      len(self.addrs))

        sched: Final[ProbeScheduler] = ProbeScheduler(transport=self.transport,
                                                      timeout=self.cfg.timeout,
                                                      rounds=self.cfg.rounds)
        alive: Final[list[ProbeRecord]] = sched.run(self.addrs)
        self.log.info("Scan complete, %d devices found", len(alive))

        fanout: Final[ResolutionFanout] = ResolutionFanout(resolver=self.resolver)
        resolved: Final[list[ResolvedRecord]] = fanout.resolve(alive)
        self.log.info("DNS complete")

        result: Final[list[ResolvedRecord]] = report.assemble(resolved)
        self.log.info("Sort complete")
        return result

    def render(self, result: list[ResolvedRecord]) -> str:
        """Render the report, with or without a banner, depending on the configuration."""
        return report.render(result, banner=not self.cfg.quiet)


# Local Variables: #
# python-indent: 4 #
# End: #
