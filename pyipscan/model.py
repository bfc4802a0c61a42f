#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-16 19:02:44 krylon>
#
# /data/code/python/pyipscan/model.py
# created on 09. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.model

(c) 2026 Benjamin Walkenhorst
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum, auto
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Union

from pyipscan.common import ScanError

IPAddress = Union[IPv4Address, IPv6Address]


class ConfigError(ScanError):
    """ConfigError indicates an invalid scan configuration."""


class Transport(Enum):
    """Transport selects the kind of socket used to send echo requests."""

    ICMP = auto()
    UDP = auto()


@dataclass(kw_only=True, slots=True)
class ScanConfig:
    """ScanConfig holds the validated parameters of a single scan."""

    start: str
    end: str
    timeout: timedelta = timedelta(seconds=1)
    rounds: int = 5
    udp: bool = False
    quiet: bool = False
    debug: bool = False
    nameservers: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.rounds < 1:
            raise ConfigError(f"Number of probe rounds must be positive, not {self.rounds}")
        if self.timeout <= timedelta(0):
            raise ConfigError(f"Probe timeout must be positive, not {self.timeout}")
        if self.quiet and self.debug:
            raise ConfigError("quiet and debug are mutually exclusive")

    @property
    def transport(self) -> Transport:
        """Return the Transport selected by the configuration."""
        return Transport.UDP if self.udp else Transport.ICMP


@dataclass(kw_only=True, slots=True, frozen=True)
class ProbeRecord:
    """ProbeRecord is a host that answered an echo request."""

    addr: IPAddress
    rtt: timedelta

    @property
    def millis(self) -> int:
        """Return the round trip time in milliseconds."""
        return round(self.rtt / timedelta(milliseconds=1))


@dataclass(kw_only=True, slots=True, frozen=True)
class ResolvedRecord:
    """ResolvedRecord is a ProbeRecord plus the names the host resolves to."""

    addr: IPAddress
    rtt: timedelta
    names: tuple[str, ...] = ()
    error: Optional[str] = None

    @classmethod
    def of(cls, rec: ProbeRecord, names=(), error: Optional[str] = None) -> 'ResolvedRecord':
        """Create a ResolvedRecord from a ProbeRecord."""
        return cls(addr=rec.addr, rtt=rec.rtt, names=tuple(names), error=error)

    @property
    def millis(self) -> int:
        """Return the round trip time in milliseconds."""
        return round(self.rtt / timedelta(milliseconds=1))

    @property
    def display_name(self) -> str:
        """Return the resolved names, or the error, as they appear in the report."""
        if self.error is not None:
            return f"Error: {self.error}"
        if len(self.names) == 0:
            return "<undefined>"
        return ", ".join(self.names)


# Local Variables: #
# python-indent: 4 #
# End: #
