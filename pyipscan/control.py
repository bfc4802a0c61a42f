#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-14 11:37:52 krylon>
#
# /data/code/python/pyipscan/control.py
# created on 10. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.control

(c) 2026 Benjamin Walkenhorst

This file contains data types that worker threads send to the coordinating thread.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from pyipscan.model import IPAddress


class Event(Enum):
    """Event identifies the kind of Message sent by the receiver thread."""

    Reply = auto()
    Error = auto()


@dataclass(kw_only=True, slots=True, frozen=True)
class Echo:
    """Echo is an echo reply as seen by the receiving socket."""

    addr: IPAddress
    stamp: float


@dataclass(kw_only=True, slots=True)
class Message:
    """Message is a message to the thread driving the probe rounds."""

    Tag: Event
    Payload: Optional[Union[Echo, str]] = None


# Local Variables: #
# python-indent: 4 #
# End: #
