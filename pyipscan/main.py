#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 19:40:06 krylon>
#
# /data/code/python/pyipscan/main.py
# created on 12. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.main

(c) 2026 Benjamin Walkenhorst
"""


import argparse
import logging
import pathlib
import sys
from datetime import timedelta
from typing import NoReturn, Optional

from pyipscan import common
from pyipscan.model import ConfigError, ScanConfig
from pyipscan.nexus import Nexus
from pyipscan.prober import TransportSetupError


class ArgParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def duration(s: str) -> timedelta:
    """Parse a duration given on the command line."""
    d: Optional[timedelta] = common.parse_duration(s)
    if d is None:
        raise argparse.ArgumentTypeError(f"invalid duration: '{s}'")
    return d


def main(argv: Optional[list[str]] = None) -> None:
    argp: ArgParser = ArgParser(
        prog=common.AppName.lower(),
        description="Find live hosts in an address range and look up their names")
    argp.add_argument("start",
                      help="The first address of the range to scan")
    argp.add_argument("end",
                      help="The last address of the range to scan")
    argp.add_argument("-n", "--count",
                      type=int,
                      default=5,
                      help="The number of probe rounds")
    argp.add_argument("-t", "--rtt",
                      type=duration,
                      default=timedelta(seconds=1),
                      help="How long to wait for replies in each round, e.g. 1s or 500ms")
    argp.add_argument("-u", "--udp",
                      action="store_true",
                      help="Use unprivileged datagram sockets instead of raw sockets")
    argp.add_argument("-q", "--quiet",
                      action="store_true",
                      help="Do not print the number of devices found")
    argp.add_argument("-v", "--debug",
                      action="store_true",
                      help="Print progress messages to stderr")
    argp.add_argument("-s", "--nameserver",
                      action="append",
                      default=[],
                      help="Ask this nameserver instead of the system's resolvers")
    argp.add_argument("-b", "--basedir",
                      type=pathlib.Path,
                      default=common.path.base(),
                      help="Directory to store the log file in")
    argp.add_argument("--version",
                      action="version",
                      version=f"%(prog)s {common.AppVersion}")

    args = argp.parse_args(argv)
    if args.quiet and args.debug:
        argp.error("--quiet and --debug are mutually exclusive")

    common.set_basedir(args.basedir)
    if args.debug:
        common.set_log_level(logging.DEBUG)

    log: logging.Logger = common.get_logger("main")
    log.info("Program started")

    try:
        cfg = ScanConfig(start=args.start,
                         end=args.end,
                         timeout=args.rtt,
                         rounds=args.count,
                         udp=args.udp,
                         quiet=args.quiet,
                         debug=args.debug,
                         nameservers=args.nameserver)
        nx = Nexus(cfg=cfg)
        result = nx.run()
    except ConfigError as err:
        print(f"{argp.prog}: {err}", file=sys.stderr)
        sys.exit(1)
    except TransportSetupError as err:
        print(f"{argp.prog}: {err}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        print("Scan interrupted.", file=sys.stderr)
        sys.exit(130)

    sys.stdout.write(nx.render(result))
    log.info("Program complete")


if __name__ == '__main__':
    main()

# Local Variables: #
# python-indent: 4 #
# End: #
