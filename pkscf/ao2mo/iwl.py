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
Buffered stream of canonical two-electron integral quartets

The integrals (pq|rs) are delivered in buffers of at most ``buflen``
entries.  Every quartet is stored once in its canonical order p>=q, r>=s,
pq>=rs where pq = p*(p+1)/2+q.  The final buffer carries the flag
``last_buffer``.

    >>> from pkscf import ao2mo
    >>> buffers = list(ao2mo.iwl.from_eri(eri_so))
    >>> reader = ao2mo.iwl.IWLReader(buffers)
    >>> for p, q, r, s, v in reader:
    ...     print(p, q, r, s, v)
'''

import numpy
import h5py
from pkscf import __config__

IWL_BUFLEN = getattr(__config__, 'ao2mo_iwl_buflen', 2980)
CUTOFF = getattr(__config__, 'ao2mo_iwl_cutoff', 1e-14)


class IWLBuffer:
    '''One buffer of integrals

    Attributes:
        labels : (n,4) int array
            Global orbital indices (p,q,r,s) of each integral
        values : (n,) float array
        last_buffer : bool
    '''
    def __init__(self, labels, values, last_buffer=False):
        self.labels = numpy.asarray(labels, dtype=numpy.int32).reshape(-1,4)
        self.values = numpy.asarray(values, dtype=numpy.double).ravel()
        if self.labels.shape[0] != self.values.size:
            raise ValueError('%d labels for %d integrals' %
                             (self.labels.shape[0], self.values.size))
        self.last_buffer = bool(last_buffer)

    def __len__(self):
        return self.values.size

    def __repr__(self):
        return '<IWLBuffer %d integrals%s>' % (len(self), ', last' if self.last_buffer else '')


def canonical_quartets(n):
    '''Labels of all canonical quartets for n orbitals in the order of
    increasing pq then rs'''
    p, q = numpy.tril_indices(n)
    npair = p.size
    pq, rs = numpy.tril_indices(npair)
    return numpy.stack((p[pq], q[pq], p[rs], q[rs]), axis=1).astype(numpy.int32)

def from_eri(eri, tol=CUTOFF, buflen=IWL_BUFLEN):
    '''Generate buffers of canonical quartets from a dense (n,n,n,n) integral
    array.  Integrals with absolute values not larger than tol are skipped,
    which removes the symmetry-forbidden quartets of an SO basis.

    At least one buffer is generated.  The last one has last_buffer=True.
    '''
    eri = numpy.asarray(eri)
    n = eri.shape[0]
    if eri.shape != (n,)*4:
        raise ValueError('ERI of shape %s is not a 4-index tensor' % (eri.shape,))
    if buflen < 1:
        raise ValueError('buflen must be positive')

    labels = canonical_quartets(n)
    values = eri[labels[:,0], labels[:,1], labels[:,2], labels[:,3]]
    mask = abs(values) > tol
    labels = labels[mask]
    values = values[mask]

    nint = values.size
    if nint == 0:
        yield IWLBuffer(numpy.zeros((0,4)), numpy.zeros(0), True)
        return
    for p0 in range(0, nint, buflen):
        p1 = min(p0 + buflen, nint)
        yield IWLBuffer(labels[p0:p1], values[p0:p1], p1 == nint)


class IWLReader:
    '''Sequential reader of integral buffers

    Args:
        source : iterable of IWLBuffer

    The first buffer is fetched when the reader is created.  :meth:`fetch`
    moves to the next buffer.  Buffers are consumed strictly in the order
    the source produces them.

    Examples:

    >>> reader = IWLReader(from_eri(eri))
    >>> while True:
    ...     process(reader.labels(), reader.values())
    ...     if reader.last_buffer():
    ...         break
    ...     reader.fetch()
    '''
    def __init__(self, source):
        self._source = iter(source)
        self._buf = None
        self._count = 0
        self.fetch()

    def fetch(self):
        '''Load the next buffer.  EOFError is raised if the current buffer is
        the last one.'''
        if self._buf is not None and self._buf.last_buffer:
            raise EOFError('Reading past the last integral buffer')
        try:
            self._buf = next(self._source)
        except StopIteration:
            raise EOFError('Integral stream ended without the last-buffer flag')
        self._count += 1
        return self._buf

    def labels(self):
        return self._buf.labels

    def values(self):
        return self._buf.values

    def last_buffer(self):
        return self._buf.last_buffer

    def buffer_count(self):
        '''Number of buffers read so far'''
        return self._count

    def buffers(self):
        '''Iterate over the current and all remaining buffers'''
        while True:
            yield self._buf
            if self._buf.last_buffer:
                break
            self.fetch()

    def __iter__(self):
        for buf in self.buffers():
            for (p, q, r, s), v in zip(buf.labels, buf.values):
                yield int(p), int(q), int(r), int(s), v


def write_h5(filename, buffers, dataset='so_tei'):
    '''Save integral buffers in an HDF5 file.  Each buffer is stored in the
    group ``dataset/<n>`` with the datasets "labels" and "values".

    Returns:
        The number of buffers written
    '''
    nbuf = 0
    with h5py.File(filename, 'a') as f:
        if dataset in f:
            del (f[dataset])
        grp = f.create_group(dataset)
        for buf in buffers:
            g = grp.create_group(str(nbuf))
            g['labels'] = buf.labels
            g['values'] = buf.values
            g.attrs['last_buffer'] = buf.last_buffer
            nbuf += 1
        grp.attrs['nbuffer'] = nbuf
    return nbuf

def read_h5(filename, dataset='so_tei'):
    '''Generate the buffers stored by :func:`write_h5`.  Only one buffer is
    held in memory at a time.'''
    with h5py.File(filename, 'r') as f:
        grp = f[dataset]
        nbuf = int(grp.attrs['nbuffer'])
        for i in range(nbuf):
            g = grp[str(i)]
            yield IWLBuffer(g['labels'][()], g['values'][()],
                            bool(g.attrs['last_buffer']))

