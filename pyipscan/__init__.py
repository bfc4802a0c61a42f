#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-09 15:02:31 krylon>
#
# /data/code/python/pyipscan/__init__.py
# created on 09. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.__init__

(c) 2026 Benjamin Walkenhorst
"""

# Local Variables: #
# python-indent: 4 #
# End: #
