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
Matrices and vectors partitioned into irrep blocks

Every operation which combines two objects requires the same block
structure and raises ShapeMismatchError otherwise.  All in-place operations
return the object itself so that they can be chained.
'''

import numpy
import scipy.linalg
from pkscf.lib.exceptions import ShapeMismatchError, IrrepIndexError


def _dims_of(x):
    if isinstance(x, (SymmetryBlockedMatrix, BlockedVector)):
        return x.dims
    # SymmInfo or a sequence of ints
    return numpy.asarray(getattr(x, 'dims', x), dtype=int)


class SymmetryBlockedMatrix:
    '''Square dense blocks, one (dims[h], dims[h]) array per irrep h.

    Args:
        dims : SymmInfo or list of int
            Block dimensions.  They are fixed for the lifetime of the object.

    Kwargs:
        name : str
            Title used by :meth:`dump`.

    Examples:

    >>> a = SymmetryBlockedMatrix((2, 1))
    >>> a.set(0, 1, 0, 2.)
    >>> a.get(0, 1, 0)
    2.0
    '''
    def __init__(self, dims, name=''):
        self.dims = _dims_of(dims).copy()
        self.name = name
        self.blocks = [numpy.zeros((n, n)) for n in self.dims]

    @classmethod
    def from_blocks(cls, blocks, name=''):
        blocks = [numpy.asarray(b, dtype=numpy.double) for b in blocks]
        for b in blocks:
            if b.ndim != 2 or b.shape[0] != b.shape[1]:
                raise ShapeMismatchError('Irrep block of shape %s is not square'
                                         % (b.shape,))
        mat = cls([b.shape[0] for b in blocks], name)
        mat.blocks = [b.copy() for b in blocks]
        return mat

    @classmethod
    def from_dense(cls, dense, dims, name=''):
        '''Cut the diagonal blocks out of a (nso,nso) block-diagonal matrix'''
        dims = _dims_of(dims)
        offsets = numpy.append(0, numpy.cumsum(dims))
        blocks = [dense[p0:p1,p0:p1] for p0, p1 in zip(offsets[:-1], offsets[1:])]
        return cls.from_blocks(blocks, name)

    @classmethod
    def identity(cls, dims, name=''):
        mat = cls(dims, name)
        mat.blocks = [numpy.eye(n) for n in mat.dims]
        return mat

    @property
    def nirrep(self):
        return len(self.dims)

    def like(self, name=''):
        '''A zero matrix of the same block structure'''
        return self.__class__(self.dims, name)

    def check_shape(self, other):
        if not numpy.array_equal(self.dims, _dims_of(other)):
            raise ShapeMismatchError('Block structures differ: %s vs %s' %
                                     (self.dims, _dims_of(other)))

    def _check_index(self, h, i, j):
        if not 0 <= h < self.nirrep:
            raise IrrepIndexError('irrep %d out of range [0,%d)' % (h, self.nirrep))
        n = self.dims[h]
        if not (0 <= i < n and 0 <= j < n):
            raise IrrepIndexError('element (%d,%d) out of range [0,%d) of irrep %d'
                                  % (i, j, n, h))

    def get(self, h, i, j):
        self._check_index(h, i, j)
        return self.blocks[h][i,j]

    def set(self, h, i, j, val):
        self._check_index(h, i, j)
        self.blocks[h][i,j] = val

    def zero(self):
        for b in self.blocks:
            b[:] = 0
        return self

    def copy(self, src=None):
        '''Without argument, return a new copy of the matrix.  Otherwise copy
        the elements of src into this matrix.'''
        if src is None:
            out = self.like(self.name)
            return out.copy(self)
        self.check_shape(src)
        for b, s in zip(self.blocks, src.blocks):
            b[:] = s
        return self

    def scale(self, s):
        for b in self.blocks:
            b *= s
        return self

    def add(self, src, alpha=1.):
        '''self += alpha * src'''
        self.check_shape(src)
        for b, s in zip(self.blocks, src.blocks):
            b += alpha * s
        return self

    def transform(self, s, a=None):
        '''Similarity transformation S^T A S for each block.  If a is given,
        the result of transforming a is stored in self, otherwise self is
        transformed in place.'''
        if a is None:
            a = self
        self.check_shape(s)
        self.check_shape(a)
        for h, (x, c) in enumerate(zip(a.blocks, s.blocks)):
            self.blocks[h][:] = c.T.dot(x).dot(c)
        return self

    def back_transform(self, c, a=None):
        '''C A C^T for each block (the inverse of transform for an
        orthogonal C)'''
        if a is None:
            a = self
        self.check_shape(c)
        self.check_shape(a)
        for h, (a0, x) in enumerate(zip(a.blocks, c.blocks)):
            self.blocks[h][:] = x.dot(a0).dot(x.T)
        return self

    def gemm(self, a, b, alpha=1., beta=0., transa=False, transb=False):
        '''self = alpha * op(a) op(b) + beta * self'''
        self.check_shape(a)
        self.check_shape(b)
        for h in range(self.nirrep):
            x = a.blocks[h].T if transa else a.blocks[h]
            y = b.blocks[h].T if transb else b.blocks[h]
            if beta == 0:
                self.blocks[h][:] = alpha * x.dot(y)
            else:
                self.blocks[h][:] = alpha * x.dot(y) + beta * self.blocks[h]
        return self

    def diagonalize(self, vecs=None, vals=None):
        '''Symmetric eigen-decomposition of each block.

        Kwargs:
            vecs, vals : SymmetryBlockedMatrix, BlockedVector
                Output buffers.  New objects are created if not given.

        Returns:
            eigenvectors : SymmetryBlockedMatrix
                Columns are eigenvectors.
            eigenvalues : BlockedVector
                In ascending order within each irrep.  The order of exactly
                degenerate eigenvalues is decided by LAPACK.
        '''
        if vecs is None:
            vecs = self.like()
        else:
            self.check_shape(vecs)
        if vals is None:
            vals = BlockedVector(self.dims)
        else:
            self.check_shape(vals)
        for h, b in enumerate(self.blocks):
            if b.size > 0:
                e, c = scipy.linalg.eigh(b)
                vecs.blocks[h][:] = c
                vals.blocks[h][:] = e
        return vecs, vals

    def vector_dot(self, other):
        '''Sum of the element-wise products over all blocks'''
        self.check_shape(other)
        return sum(numpy.einsum('ij,ij->', a, b)
                   for a, b in zip(self.blocks, other.blocks))

    def zero_diagonal(self):
        for b in self.blocks:
            b[numpy.diag_indices(b.shape[0])] = 0
        return self

    def rms(self, other=None):
        '''Root-mean-square of the elements (of self - other)'''
        n = int((self.dims**2).sum())
        if n == 0:
            return 0.
        if other is None:
            ss = sum((b**2).sum() for b in self.blocks)
        else:
            self.check_shape(other)
            ss = sum(((a-b)**2).sum() for a, b in zip(self.blocks, other.blocks))
        return numpy.sqrt(ss / n)

    def ravel(self):
        '''All blocks concatenated in one 1D array'''
        if not self.blocks:
            return numpy.zeros(0)
        return numpy.hstack([b.ravel() for b in self.blocks])

    def set_vector(self, vec):
        '''Reversed operation of ravel'''
        vec = numpy.asarray(vec)
        if vec.size != int((self.dims**2).sum()):
            raise ShapeMismatchError('Vector of size %d does not match blocks %s'
                                     % (vec.size, self.dims))
        p0 = 0
        for h, n in enumerate(self.dims):
            self.blocks[h][:] = vec[p0:p0+n*n].reshape(n, n)
            p0 += n * n
        return self

    def to_block_matrix(self):
        '''The dense block-diagonal (nso,nso) matrix'''
        return scipy.linalg.block_diag(*self.blocks) if self.blocks else numpy.zeros((0,0))

    def dump(self, log, title=None, irrep_name=None):
        '''Print the blocks through the logger object log'''
        if title is None:
            title = self.name
        log.debug(' ** %s **', title)
        for h, b in enumerate(self.blocks):
            label = irrep_name[h] if irrep_name is not None else str(h)
            log.debug(' irrep %s (%d x %d)', label, b.shape[0], b.shape[1])
            if b.size > 0:
                log.debug('%s', b)

    def __repr__(self):
        return '<SymmetryBlockedMatrix %s dims=%s>' % (self.name, list(self.dims))


class BlockedVector:
    '''One 1D array of length dims[h] per irrep h, e.g. the orbital
    energies'''
    def __init__(self, dims, name=''):
        self.dims = _dims_of(dims).copy()
        self.name = name
        self.blocks = [numpy.zeros(n) for n in self.dims]

    @classmethod
    def from_blocks(cls, blocks, name=''):
        blocks = [numpy.asarray(b, dtype=numpy.double).ravel() for b in blocks]
        vec = cls([b.size for b in blocks], name)
        vec.blocks = [b.copy() for b in blocks]
        return vec

    @property
    def nirrep(self):
        return len(self.dims)

    def get(self, h, i):
        if not (0 <= h < self.nirrep and 0 <= i < self.dims[h]):
            raise IrrepIndexError('element %d of irrep %d out of range' % (i, h))
        return self.blocks[h][i]

    def set(self, h, i, val):
        if not (0 <= h < self.nirrep and 0 <= i < self.dims[h]):
            raise IrrepIndexError('element %d of irrep %d out of range' % (i, h))
        self.blocks[h][i] = val

    def to_block_vector(self):
        if not self.blocks:
            return numpy.zeros(0)
        return numpy.hstack(self.blocks)

    def orbsym(self):
        '''Irrep id of every element of to_block_vector()'''
        return numpy.repeat(numpy.arange(self.nirrep), self.dims)

    def sorted_pairs(self):
        '''(value, irrep) pairs in ascending order of the values.  Ties keep
        the block order.'''
        vals = self.to_block_vector()
        orbsym = self.orbsym()
        idx = numpy.argsort(vals, kind='stable')
        return [(vals[i], int(orbsym[i])) for i in idx]

    def __repr__(self):
        return '<BlockedVector %s dims=%s>' % (self.name, list(self.dims))
