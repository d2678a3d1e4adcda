#!/usr/bin/env python
# Copyright 2014-2024 The PKSCF Developers. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

'''
Verbosity-controlled output of the SCF objects

Every object that reports (the ROHF driver, the DIIS history, the test
molecule) carries ``stdout`` and ``verbose``.  The module functions take such
an object as first argument; :class:`Logger` bundles the pair for code that
is handed a reporting destination instead of owning one.

======= ======
Level   number
------- ------
DEBUG1  6
DEBUG   5
INFO    4
NOTE    3
WARN    2
ERROR   1
QUIET   0
======= ======

Errors and warnings are echoed on stderr when the object writes elsewhere.

>>> import sys
>>> from pkscf.lib import logger
>>> log = logger.Logger(sys.stdout, 4)
>>> log.info('cycle= %d', 1)
cycle= 1
>>> log.verbose = 3
>>> log.info('cycle= %d', 2)

Timings are printed at :attr:`TIMER_LEVEL` (DEBUG unless configured).
'''

import sys
import time

process_clock = time.process_time
perf_counter = time.perf_counter

from pkscf.lib import parameters as param
from pkscf import __config__

DEBUG1 = param.VERBOSE_DEBUG + 1
DEBUG  = param.VERBOSE_DEBUG
INFO   = param.VERBOSE_INFO
NOTE   = param.VERBOSE_NOTICE
WARN   = param.VERBOSE_WARN
ERROR  = param.VERBOSE_ERR
QUIET  = param.VERBOSE_QUIET

TIMER_LEVEL = getattr(__config__, 'TIMER_LEVEL', DEBUG)

def _write(rec, msg, *args):
    rec.stdout.write(msg%args)
    rec.stdout.write('\n')
    rec.stdout.flush()

def log(rec, msg, *args):
    if rec.verbose > QUIET:
        _write(rec, msg, *args)

def error(rec, msg, *args):
    if rec.verbose >= ERROR:
        _write(rec, '\nERROR: '+msg+'\n', *args)
    sys.stderr.write('ERROR: ' + (msg%args) + '\n')

def warn(rec, msg, *args):
    if rec.verbose >= WARN:
        _write(rec, '\nWARN: '+msg+'\n', *args)
        if rec.stdout is not sys.stdout:
            sys.stderr.write('WARN: ' + (msg%args) + '\n')

def info(rec, msg, *args):
    if rec.verbose >= INFO:
        _write(rec, msg, *args)

def note(rec, msg, *args):
    if rec.verbose >= NOTE:
        _write(rec, msg, *args)

def debug(rec, msg, *args):
    if rec.verbose >= DEBUG:
        _write(rec, msg, *args)

def debug1(rec, msg, *args):
    if rec.verbose >= DEBUG1:
        _write(rec, msg, *args)

def timer(rec, msg, cpu0=None, wall0=None):
    '''Report the CPU (and wall) time elapsed since cpu0 (wall0) and return
    the new reference point(s)'''
    if cpu0 is None:
        cpu0 = rec._t0
    if wall0:
        rec._t0, rec._w0 = process_clock(), perf_counter()
        if rec.verbose >= TIMER_LEVEL:
            _write(rec, '    CPU time for %s %9.2f sec, wall time %9.2f sec'
                   % (msg, rec._t0-cpu0, rec._w0-wall0))
        return rec._t0, rec._w0
    else:
        rec._t0 = process_clock()
        if rec.verbose >= TIMER_LEVEL:
            _write(rec, '    CPU time for %s %9.2f sec' % (msg, rec._t0-cpu0))
        return rec._t0

class Logger:
    '''
    Attributes:
        stdout : file object or sys.stdout
            Destination of the messages.
        verbose : int
            Messages above this level are dropped.
    '''
    def __init__(self, stdout=sys.stdout, verbose=NOTE):
        self.stdout = stdout
        self.verbose = verbose
        self._t0 = process_clock()
        self._w0 = perf_counter()

    log = log
    error = error
    warn = warn
    note = note
    info = info
    debug  = debug
    debug1 = debug1
    timer = timer

def new_logger(rec=None, verbose=None):
    '''A :class:`Logger` writing to rec.stdout.

    verbose may be a Logger (returned as is), an integer level, or None to
    take rec.verbose.
    '''
    if isinstance(verbose, Logger):
        log = verbose
    elif isinstance(verbose, int):
        log = Logger(getattr(rec, 'stdout', None) or sys.stdout, verbose)
    else:
        log = Logger(rec.stdout, rec.verbose)
    return log
