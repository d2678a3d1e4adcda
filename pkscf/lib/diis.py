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

"""
DIIS
"""

import numpy
import scipy.linalg
from pkscf.lib import logger
from pkscf.lib import misc
from pkscf import __config__

INCORE_SIZE = getattr(__config__, 'lib_diis_incore_size', 10000000)  # 80 MB
SINGULAR_THRESHOLD = getattr(__config__, 'lib_diis_singular_threshold', 1e-14)

# J. Mol. Struct. 114, 31-34 (1984); DOI:10.1016/S0022-2860(84)87198-7
# PCCP, 4, 11 (2002); DOI:10.1039/B108658H

class DIIS:
    '''Direct inversion in the iterative subspace method.

    The (vector, error vector) pairs are kept in a ring buffer of
    :attr:`space` slots.  When the buffer is full, the oldest pair is
    overwritten by the new one.

    Attributes:
        space : int
            DIIS subspace size. The maximum number of the vectors to be stored.
        min_space
            The minimal size of subspace before DIIS extrapolation.

    Functions:
        push(x, xerr, tag=None) :
            Store the vector x and its error vector xerr.  tag is an arbitrary
            label (e.g. the SCF cycle) to identify the entry.
        extrapolate() :
            Solve the DIIS equations and return the extrapolated vector.
            None is returned if the DIIS equations are singular.

    Examples:

    >>> adiis = DIIS()
    >>> adiis.space = 2
    >>> for i in range(3):
    ...     adiis.push(numpy.ones(4)*i, numpy.ones(4)*(3-i), tag=i)
    >>> adiis.tags()
    [1, 2]
    '''
    def __init__(self, dev=None, filename=None,
                 incore=getattr(__config__, 'lib_diis_DIIS_incore', False)):
        if dev is not None:
            self.verbose = dev.verbose
            self.stdout = dev.stdout
        else:
            self.verbose = logger.INFO
            self.stdout = misc.StreamObject.stdout
        self.space = 8
        self.min_space = 2
        self.incore = incore

##################################################
# don't modify the following private variables, they are not input options
        self.filename = filename
        self._diisfile = None
        self._buffer = {}
        self._bookkeep = [] # keep the ordering of input vectors
        self._tags = {}
        self._head = 0
        self._H = None

    def _store(self, key, value):
        incore = value.size < INCORE_SIZE or self.incore
        if incore:
            self._buffer[key] = value

        # save the vectors if filename is given, the history is then kept on
        # disk as well
        if (not incore) or isinstance(self.filename, str):
            if self._diisfile is None:
                self._diisfile = misc.H5TmpFile(self.filename, 'w')
            if key in self._diisfile:
                self._diisfile[key][:] = value
            else:
                self._diisfile[key] = value
# to avoid "Unable to find a valid file signature" error when reload the hdf5
# file from a crashed calculation
            self._diisfile.flush()

    def push(self, x, xerr, tag=None):
        x = numpy.asarray(x).ravel()
        xerr = numpy.asarray(xerr).ravel()
        if self.space < 1:
            raise ValueError('DIIS space must be at least 1, got %s' % self.space)
        if self._H is None:
            self._H = numpy.zeros((self.space+1,self.space+1), xerr.dtype)

        if self._head >= self.space:
            self._head = 0
        if len(self._bookkeep) >= self.space:
            # the slot at _head holds the oldest entry
            self._bookkeep.pop(0)

        head = self._head
        self._store('x%d' % head, x)
        self._store('e%d' % head, xerr)
        self._tags[head] = tag
        self._bookkeep.append(head)

        for i in self._bookkeep:
            tmp = numpy.dot(xerr.conj(), numpy.asarray(self.get_err_vec(i)))
            self._H[head+1,i+1] = tmp
            self._H[i+1,head+1] = tmp.conjugate()
        self._head += 1
        logger.debug1(self, 'diis push tag %s into slot %d, %d vectors in space',
                      tag, head, len(self._bookkeep))
        return head

    def get_err_vec(self, idx):
        key = 'e%d' % idx
        if key in self._buffer:
            return self._buffer[key]
        else:
            return self._diisfile[key]

    def get_vec(self, idx):
        key = 'x%d' % idx
        if key in self._buffer:
            return self._buffer[key]
        else:
            return self._diisfile[key]

    def get_num_vec(self):
        return len(self._bookkeep)

    def tags(self):
        '''Tags of the stored entries, from the oldest to the newest'''
        return [self._tags[i] for i in self._bookkeep]

    def extrapolate(self):
        '''Solve the DIIS equations

            [ 0  1  ...  1  ] [ -lambda ]   [ 1 ]
            [ 1  B11 ... B1n] [   c1    ] = [ 0 ]
            [ ...           ] [   ...   ]   [...]
            [ 1  Bn1 ... Bnn] [   cn    ]   [ 0 ]

        and return sum_i c_i x_i.  None is returned when fewer than
        min_space vectors are stored or the equations are singular.
        '''
        nd = self.get_num_vec()
        if nd < max(self.min_space, 1):
            return None

        idx = numpy.asarray(self._bookkeep) + 1
        h = numpy.zeros((nd+1,nd+1), self._H.dtype)
        h[0,1:] = h[1:,0] = 1
        b = self._H[idx[:,None],idx]
        scale = abs(b.diagonal()).max()
        if scale == 0:
            logger.warn(self, 'diis error vectors are all zero')
            return None
        h[1:,1:] = b / scale
        g = numpy.zeros(nd+1, h.dtype)
        g[0] = 1

        w = scipy.linalg.eigh(h, eigvals_only=True)
        if numpy.any(abs(w) < SINGULAR_THRESHOLD):
            logger.warn(self, 'singularity in diis, eigh(h) %s', w)
            return None
        try:
            c = numpy.linalg.solve(h, g)
        except numpy.linalg.LinAlgError as e:
            logger.warn(self, 'diis singular, %s', e)
            return None
        if not numpy.all(numpy.isfinite(c)):
            logger.warn(self, 'diis coefficients are not finite')
            return None
        logger.debug1(self, 'diis-c %s', c)

        xnew = None
        for i, ci in zip(self._bookkeep, c[1:]):
            xi = numpy.asarray(self.get_vec(i))
            if xnew is None:
                xnew = numpy.zeros(xi.size, c.dtype)
            xnew += xi * ci
        return xnew

    def reset(self):
        '''Clear the history'''
        self._buffer = {}
        self._bookkeep = []
        self._tags = {}
        self._head = 0
        self._H = None
        if self._diisfile is not None:
            for key in list(self._diisfile.keys()):
                del self._diisfile[key]
        return self
