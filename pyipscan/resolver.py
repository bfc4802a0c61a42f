#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-19 11:42:17 krylon>
#
# /data/code/python/pyipscan/resolver.py
# created on 11. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.resolver

(c) 2026 Benjamin Walkenhorst
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Final, Sequence

from dns.exception import DNSException, Timeout
from dns.rcode import Rcode
from dns.resolver import NXDOMAIN, Answer, NoAnswer, NoNameservers, Resolver

from pyipscan import common
from pyipscan.common import ScanError
from pyipscan.model import ConfigError, IPAddress, ProbeRecord, ResolvedRecord

dns_timeout: Final[float] = 2.5
max_lookups: Final[int] = 64


class ResolveError(ScanError):
    """ResolveError indicates a failed reverse lookup."""


@dataclass(kw_only=True, slots=True)
class NameResolver:
    """NameResolver looks up the hostnames of IP addresses."""

    log: logging.Logger = field(default_factory=lambda: common.get_logger("resolver"))
    nameservers: list[str] = field(default_factory=list)
    res: Resolver = field(default=None)

    def __post_init__(self) -> None:
        if self.res is None:
            if len(self.nameservers) > 0:
                self.res = Resolver(configure=False)
                self.res.nameservers = self.nameservers
            else:
                self.res = Resolver()

            self.res.timeout = dns_timeout
            self.res.lifetime = dns_timeout

    def lookup(self, addr: IPAddress) -> list[str]:
        """Return the names <addr> resolves to. The list is empty if there are none."""
        try:
            answer: Answer = self.res.resolve_address(str(addr))
            match answer.response.rcode():
                case Rcode.NOERROR if answer.rrset is not None:
                    return [rr.to_text() for rr in answer.rrset]
                case Rcode.NOERROR:
                    return []
                case rcode:
                    raise ResolveError(f"Unexpected response code {Rcode.to_text(rcode)}")
        except NXDOMAIN as nx:
            raise ResolveError(f"lookup {addr}: no such host") from nx
        except NoAnswer:
            return []
        except NoNameservers as fail:
            raise ResolveError(f"lookup {addr}: no nameserver answered") from fail
        except Timeout as tmo:
            raise ResolveError(f"lookup {addr}: {tmo}") from tmo
        except DNSException as err:
            raise ResolveError(f"lookup {addr}: {err}") from err


@dataclass(kw_only=True, slots=True)
class ResolutionFanout:
    """ResolutionFanout resolves the names of many addresses in parallel.

    Each lookup is a task of its own that stores its result in its own slot.
    At most wcnt lookups run at the same time.
    """

    resolver: NameResolver
    log: logging.Logger = field(default_factory=lambda: common.get_logger("fanout"))
    wcnt: int = max_lookups

    def __post_init__(self) -> None:
        if self.wcnt < 1:
            raise ConfigError(f"Number of lookup workers must be positive, not {self.wcnt}")

    def resolve(self, records: Sequence[ProbeRecord]) -> list[ResolvedRecord]:
        """Look up the names of all <records>, return once every lookup is finished."""
        slots: list[ResolvedRecord] = [ResolvedRecord.of(rec, error="lookup did not finish")
                                       for rec in records]

        if len(records) == 0:
            return slots

        with ThreadPoolExecutor(max_workers=min(self.wcnt, len(records)),
                                thread_name_prefix="lookup") as pool:
            for idx, rec in enumerate(records):
                pool.submit(self._lookup_worker, idx, rec, slots)

        self.log.debug("Resolved %d addresses", len(slots))

        return slots

    def _lookup_worker(self,
                       idx: int,
                       rec: ProbeRecord,
                       slots: list[ResolvedRecord]) -> None:
        result: ResolvedRecord
        try:
            names: list[str] = self.resolver.lookup(rec.addr)
            result = ResolvedRecord.of(rec, names)
        except ResolveError as err:
            self.log.debug("Failed to resolve %s: %s", rec.addr, err)
            result = ResolvedRecord.of(rec, error=str(err))
        except Exception as err:  # pylint: disable-msg=W0718
            cname: Final[str] = err.__class__.__name__
            self.log.error("%s trying to resolve %s: %s",
                           cname,
                           rec.addr,
                           err)
            result = ResolvedRecord.of(rec, error=f"{cname} {err}")
        slots[idx] = result


# Local Variables: #
# python-indent: 4 #
# End: #
