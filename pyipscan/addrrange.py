#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-15 21:48:30 krylon>
#
# /data/code/python/pyipscan/addrrange.py
# created on 09. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.addrrange

(c) 2026 Benjamin Walkenhorst
"""

from dataclasses import dataclass, field
from ipaddress import ip_address
from typing import Final, Iterator, Union

from pyipscan.model import ConfigError, IPAddress


class InvalidAddress(ConfigError):
    """InvalidAddress indicates a string that could not be parsed as an IP address."""


class FamilyMismatch(ConfigError):
    """FamilyMismatch indicates range bounds from different address families."""


def parse_address(s: Union[str, IPAddress]) -> IPAddress:
    """Parse <s> into an IPv4Address or IPv6Address."""
    try:
        return ip_address(s)
    except ValueError as verr:
        raise InvalidAddress(f"'{s}' does not look like an IP address") from verr


def increment(raw: bytes) -> bytes:
    """Return the address following <raw>, treating it as a big-endian unsigned number."""
    buf: Final[bytearray] = bytearray(raw)
    for i in reversed(range(len(buf))):
        buf[i] = (buf[i] + 1) & 0xff
        if buf[i] != 0:
            break
    return bytes(buf)


@dataclass(kw_only=True, slots=True)
class AddressRange:
    """AddressRange is the list of addresses from start to end, both inclusive.

    If start comes after end, the range is empty.
    """

    start: IPAddress
    end: IPAddress
    _start: bytes = field(init=False)
    _end: bytes = field(init=False)

    def __post_init__(self) -> None:
        self.start = parse_address(self.start)
        self.end = parse_address(self.end)
        if self.start.version != self.end.version:
            raise FamilyMismatch(
                f"{self.start} and {self.end} belong to different address families")
        self._start = self.start.packed
        self._end = self.end.packed

    @property
    def family(self) -> int:
        """Return the IP version of the range, 4 or 6."""
        return self.start.version

    def __len__(self) -> int:
        width: Final[int] = int.from_bytes(self._end, "big") - int.from_bytes(self._start, "big")
        return max(width + 1, 0)

    def __iter__(self) -> Iterator[IPAddress]:
        if self._start > self._end:
            return

        cur: bytes = self._start
        while True:
            yield ip_address(cur)
            if cur == self._end:
                return
            cur = increment(cur)


# Local Variables: #
# python-indent: 4 #
# End: #
