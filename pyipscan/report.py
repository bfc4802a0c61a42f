#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-16 18:30:02 krylon>
#
# /data/code/python/pyipscan/report.py
# created on 11. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.report

(c) 2026 Benjamin Walkenhorst
"""

from typing import Final, Iterable

from pyipscan.model import ResolvedRecord

probe_width: Final[int] = 25


def address_key(rec: ResolvedRecord) -> bytes:
    """Return the raw bytes of the Record's address, for sorting."""
    return rec.addr.packed


def assemble(records: Iterable[ResolvedRecord]) -> list[ResolvedRecord]:
    """Return the records sorted by address, numerically."""
    return sorted(records, key=address_key)


def format_record(rec: ResolvedRecord) -> str:
    """Render a single line of the report."""
    probe: Final[str] = f"{rec.addr} {rec.millis}ms"
    return f"{probe:<{probe_width}}\t--> {rec.display_name}\n"


def render(report: list[ResolvedRecord], banner: bool = True) -> str:
    """Render the report as text."""
    out: list[str] = []

    if banner:
        out.append(f"\n{len(report)} devices found\n\n")

    for rec in report:
        out.append(format_record(rec))

    out.append("\n")
    return "".join(out)


# Local Variables: #
# python-indent: 4 #
# End: #
