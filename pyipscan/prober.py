#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-19 11:03:48 krylon>
#
# /data/code/python/pyipscan/prober.py
# created on 10. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.prober

(c) 2026 Benjamin Walkenhorst

Send echo requests to a bunch of addresses, in several rounds, and see who answers.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from datetime import timedelta
from ipaddress import IPv4Address, IPv6Address, ip_address
from queue import Empty, Queue
from threading import RLock, Thread
from typing import Callable, Final, Iterable, Optional

from icmplib import (ICMPLibError, ICMPRequest, ICMPv4Socket, ICMPv6Socket,
                     TimeoutExceeded)

from pyipscan import common
from pyipscan.common import ScanError
from pyipscan.control import Echo, Event, Message
from pyipscan.model import ConfigError, IPAddress, ProbeRecord, Transport

poll_interval: Final[float] = 0.1

echo_reply_type: Final[dict[int, int]] = {
    4: 0,
    6: 129,
}


class TransportError(ScanError):
    """TransportError indicates a failure to send or receive an echo packet."""


class TransportSetupError(TransportError):
    """TransportSetupError indicates that probing could not even begin."""


def round_trip(rnd: int, timeout: timedelta, latency: float) -> timedelta:
    """Return the round trip time for a reply in round <rnd>, rounded to the millisecond.

    A host that answers in a later round has had <rnd> timeouts' worth of chances
    before, so those are added to the measured latency.
    """
    total: Final[timedelta] = timeout * rnd + timedelta(seconds=latency)
    return timedelta(milliseconds=round(total / timedelta(milliseconds=1)))


@dataclass(kw_only=True, slots=True)
class EchoTransport:
    """EchoTransport is the interface ProbeScheduler uses to send and receive echo packets."""

    family: int = 4

    def __enter__(self) -> 'EchoTransport':
        self.open()
        return self

    def __exit__(self, _ex_type, _ex_val, _traceback) -> None:
        self.close()

    def open(self) -> None:
        """Prepare the Transport for sending and receiving."""
        raise NotImplementedError

    def close(self) -> None:
        """Release the Transport's resources."""
        raise NotImplementedError

    def send(self, addr: IPAddress, seq: int) -> float:
        """Send an echo request to <addr>, return the time it was sent."""
        raise NotImplementedError

    def receive(self, timeout: float) -> Optional[Echo]:
        """Wait up to <timeout> seconds for an echo reply."""
        raise NotImplementedError


@dataclass(kw_only=True, slots=True)
class ICMPTransport(EchoTransport):
    """ICMPTransport sends ICMP echo requests.

    Unless privileged is True, an unprivileged datagram socket is used.
    On Linux, that requires the user's group to be in net.ipv4.ping_group_range.
    """

    log: logging.Logger = field(default_factory=lambda: common.get_logger("icmp"))
    privileged: bool = True
    ident: int = field(default_factory=lambda: os.getpid() & 0xffff)
    payload_size: int = 56
    sock: Optional[ICMPv4Socket] = None

    @classmethod
    def create(cls, kind: Transport, family: int) -> 'ICMPTransport':
        """Create an ICMPTransport for the given Transport type and address family."""
        return cls(family=family, privileged=(kind == Transport.ICMP))

    def open(self) -> None:
        kind: Final[str] = "raw" if self.privileged else "datagram"
        self.log.debug("Open %s ICMPv%d socket", kind, self.family)
        try:
            match self.family:
                case 4:
                    self.sock = ICMPv4Socket(privileged=self.privileged)
                case 6:
                    self.sock = ICMPv6Socket(privileged=self.privileged)
                case _:
                    raise TransportSetupError(f"Unsupported address family {self.family}")
        except ICMPLibError as err:
            cname: Final[str] = err.__class__.__name__
            raise TransportSetupError(
                f"Cannot open {kind} ICMPv{self.family} socket: {cname} {err}") from err

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def send(self, addr: IPAddress, seq: int) -> float:
        if self.sock is None:
            raise TransportError("Socket is not open")

        req: Final[ICMPRequest] = ICMPRequest(destination=str(addr),
                                              id=self.ident,
                                              sequence=seq & 0xffff,
                                              payload_size=self.payload_size)
        try:
            self.sock.send(req)
        except ICMPLibError as err:
            raise TransportError(f"{err.__class__.__name__} {err}") from err
        return req.time

    def receive(self, timeout: float) -> Optional[Echo]:
        if self.sock is None:
            raise TransportError("Socket is not open")

        try:
            reply = self.sock.receive(None, timeout)
        except TimeoutExceeded:
            return None
        except ICMPLibError as err:
            raise TransportError(f"{err.__class__.__name__} {err}") from err

        if reply.type != echo_reply_type[self.family]:
            return None
        # The kernel rewrites the identifier on datagram sockets, and those only
        # see their own replies anyway.
        if self.privileged and reply.id != self.ident:
            return None

        try:
            addr: Final[IPAddress] = ip_address(reply.source)
        except ValueError:
            self.log.debug("Cannot parse source address of reply: %s", reply.source)
            return None

        return Echo(addr=addr, stamp=reply.time)


@dataclass(kw_only=True, slots=True)
class ProbeScheduler:
    """ProbeScheduler sends echo requests in rounds and collects the replies."""

    transport: EchoTransport
    timeout: timedelta
    rounds: int
    log: logging.Logger = field(default_factory=lambda: common.get_logger("prober"))
    lock: RLock = field(default_factory=RLock)
    clock: Callable[[], float] = time.monotonic
    replyQ: Queue[Message] = field(init=False)
    _active: bool = False

    def __post_init__(self) -> None:
        if self.rounds < 1:
            raise ConfigError(f"Number of probe rounds must be positive, not {self.rounds}")
        self.replyQ = Queue(0)

    @property
    def active(self) -> bool:
        """Return the ProbeScheduler's active flag."""
        with self.lock:
            return self._active

    def run(self, targets: Iterable[IPAddress]) -> list[ProbeRecord]:
        """Probe all <targets> and return a ProbeRecord for every one that replied."""
        # Pending addresses, with the send time of every round they were probed in.
        pending: dict[IPAddress, dict[int, float]] = {}
        records: list[ProbeRecord] = []

        for addr in targets:
            pending[self._check_target(addr)] = {}

        if len(pending) == 0:
            return records

        with self.transport:
            with self.lock:
                self._active = True

            rx: Thread = Thread(target=self._receiver, name="echo_receiver", daemon=True)
            rx.start()

            try:
                for idx in range(self.rounds):
                    if len(pending) == 0:
                        break
                    self._round(idx, pending, records)
            finally:
                with self.lock:
                    self._active = False
                rx.join()

        self.log.debug("%d of %d addresses replied, %d did not.",
                       len(records),
                       len(records) + len(pending),
                       len(pending))

        return records

    def _check_target(self, addr: IPAddress) -> IPAddress:
        match addr:
            case IPv4Address() | IPv6Address() if addr.version == self.transport.family:
                return addr
            case _:
                raise TransportSetupError(
                    f"Cannot probe {addr!r} over IPv{self.transport.family}")

    def _round(self,
               idx: int,
               pending: dict[IPAddress, dict[int, float]],
               records: list[ProbeRecord]) -> None:
        """Send one echo request to each pending address and wait for replies."""
        self.log.debug("Round %d/%d: probing %d addresses",
                       idx+1,
                       self.rounds,
                       len(pending))

        for addr, sent in pending.items():
            try:
                sent[idx] = self.transport.send(addr, idx)
            except TransportError as err:
                self.log.error("Failed to send echo request to %s: %s",
                               addr,
                               err)

        # The reply window opens once every request is out.
        deadline: Final[float] = self.clock() + self.timeout.total_seconds()

        while len(pending) > 0:
            remaining: float = deadline - self.clock()
            if remaining <= 0:
                break
            try:
                msg: Message = self.replyQ.get(True, remaining)
            except Empty:
                break
            self._dispatch(msg, idx, pending, records)

        # Whatever has already been received still counts for this round.
        while len(pending) > 0:
            try:
                msg = self.replyQ.get(False)
            except Empty:
                break
            self._dispatch(msg, idx, pending, records)

    def _dispatch(self,
                  msg: Message,
                  idx: int,
                  pending: dict[IPAddress, dict[int, float]],
                  records: list[ProbeRecord]) -> None:
        match msg:
            case Message(Tag=Event.Reply, Payload=Echo() as echo):
                self._handle_reply(echo, idx, pending, records)
            case Message(Tag=Event.Error, Payload=err):
                self.log.error("Error receiving echo replies: %s", err)

    def _handle_reply(self,
                      echo: Echo,
                      idx: int,
                      pending: dict[IPAddress, dict[int, float]],
                      records: list[ProbeRecord]) -> None:
        """Turn the first reply from a pending address into a ProbeRecord."""
        sent: Optional[dict[int, float]] = pending.pop(echo.addr, None)
        if sent is None:
            self.log.debug("Discard reply from %s, which is not pending.", echo.addr)
            return

        # A reply that shows up late is attributed to the latest request it can answer.
        rnd: int = idx
        latency: float = 0.0
        for r in sorted(sent, reverse=True):
            if sent[r] <= echo.stamp:
                rnd = r
                latency = echo.stamp - sent[r]
                break

        rec: Final[ProbeRecord] = ProbeRecord(addr=echo.addr,
                                              rtt=round_trip(rnd, self.timeout, latency))
        self.log.debug("Reply from %s in round %d after %d ms",
                       rec.addr,
                       rnd+1,
                       rec.millis)
        records.append(rec)

    def _receiver(self) -> None:
        """Wait for echo replies and hand them to the coordinating thread."""
        self.log.debug("Receiver thread is coming up.")
        try:
            while self.active:
                try:
                    echo: Optional[Echo] = self.transport.receive(poll_interval)
                except TransportError as err:
                    self.replyQ.put(Message(Tag=Event.Error, Payload=str(err)))
                    time.sleep(poll_interval)
                    continue

                if echo is not None:
                    self.replyQ.put(Message(Tag=Event.Reply, Payload=echo))
        finally:
            self.log.debug("Receiver thread is quitting.")


# Local Variables: #
# python-indent: 4 #
# End: #
