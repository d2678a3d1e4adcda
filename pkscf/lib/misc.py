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
Helpers shared by the SCF objects: the StreamObject base class, HDF5 file
handles and small iteration utilities
'''

import os
import sys
import tempfile
import warnings
import h5py

from pkscf.lib import parameters as param
from pkscf import __config__

SANITY_CHECK = getattr(__config__, 'SANITY_CHECK', True)

def current_memory():
    '''Resident and virtual memory of this process in MB ((0, 0) outside
    Linux)'''
    if sys.platform.startswith('linux'):
        pagesize = os.sysconf('SC_PAGE_SIZE')
        with open('/proc/%s/statm' % os.getpid()) as f:
            vms, rss = [int(x)*pagesize for x in f.readline().split()[:2]]
        return rss/1e6, vms/1e6
    else:
        return 0, 0

def prange(start, end, step):
    '''Yield the (p0, p1) bounds of the segments of length step which cover
    [start, end).

    >>> list(lib.prange(0, 10, 4))
    [(0, 4), (4, 8), (8, 10)]
    '''
    for p0 in range(start, end, step):
        yield p0, min(p0+step, end)


class StreamObject:
    '''Base class of the objects which carry ``stdout`` and ``verbose``.

    ``.set(**kwargs)`` updates attributes and returns the object, ``.run()``
    calls ``.kernel()`` and returns the object, so that

    >>> mf = scf.ROHF(mol).set(conv_tol=1e-10).run()

    is a complete calculation.
    '''

    verbose = 0
    stdout = sys.stdout
    # attributes known to the class, anything else is reported as misinput
    _keys = {'verbose', 'stdout', 'max_memory'}

    def kernel(self, *args, **kwargs):
        pass

    def run(self, *args, **kwargs):
        self.set(**kwargs)
        self.kernel(*args)
        return self

    def set(self, *args, **kwargs):
        if args:
            warnings.warn('set() only accepts keyword arguments. '
                          'Arguments %s are ignored.' % (args,))
        for k, v in kwargs.items():
            setattr(self, k, v)
        return self

    __call__ = set

    def check_sanity(self):
        '''Report public attributes which no class in the MRO declares in
        its ``_keys``.'''
        if SANITY_CHECK and self.verbose > 0:
            keys_ref = set(self._keys)
            for cls in self.__class__.__mro__[:-1]:
                keys_ref.update(getattr(cls, '_keys', ()))
            check_sanity(self, keys_ref, self.stdout)
        return self


_warned = set()
def check_sanity(obj, keysref, stdout=sys.stdout):
    unknown = set(x for x in obj.__dict__ if not x.startswith('_'))
    unknown = unknown - set(keysref) - set(dir(obj.__class__))
    if unknown:
        msg = ('%s does not have attributes  %s\n' %
               (obj.__class__, ' '.join(sorted(unknown))))
        if msg not in _warned:
            _warned.add(msg)
            sys.stderr.write(msg)
            if stdout is not sys.stdout:
                stdout.write(msg)
    return obj


class H5FileWrap(h5py.File):
    '''h5py.File which applies lib.param.H5F_WRITE_KWARGS when the file is
    opened for writing.'''
    def __init__(self, filename, mode, *args, **kwargs):
        if mode != 'r':
            options = param.H5F_WRITE_KWARGS.copy()
            options.update(kwargs)
        else:
            options = kwargs
        super().__init__(filename, mode, *args, **options)


class H5TmpFile(H5FileWrap):
    '''HDF5 scratch file.  Without filename, a temporary file is created in
    lib.param.TMPDIR and removed together with this object.
    '''
    def __init__(self, filename=None, mode='a', dir=param.TMPDIR, **kwargs):
        self._tmpfile = None
        if filename is None:
            self._tmpfile = tempfile.NamedTemporaryFile(dir=dir, suffix='.h5')
            filename = self._tmpfile.name
            mode = 'w'
        super().__init__(filename, mode, **kwargs)

    def close(self):
        if self.id.valid:
            super().close()
        if self._tmpfile is not None:
            self._tmpfile.close()
            self._tmpfile = None
