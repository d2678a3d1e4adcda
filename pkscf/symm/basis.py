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
Symmetry-orbital (SO) basis descriptor

The SOs are numbered irrep by irrep.  For the global SO index p,
so2irrep[p] is its irrep and so2index[p] its position inside the irrep block.
The point group analysis which produces the SO coefficients (symm_orb) is
done elsewhere; this module only records the block structure and adapts AO
integrals to it.
'''

import numpy


class SymmInfo:
    '''Block structure of a symmetry-adapted basis

    Attributes:
        irrep_name : tuple of str
            Labels of the irreducible representations.
        dims : ndarray of int
            Number of orbitals in each irrep.  Zero is allowed.

    Examples:

    >>> s = SymmInfo(('Ag', 'B1u'), (2, 1))
    >>> s.so2irrep
    array([0, 0, 1])
    >>> s.pair_offsets
    array([0, 3])
    >>> s.pk_size
    10
    '''
    def __init__(self, irrep_name, dims):
        if len(irrep_name) != len(dims):
            raise ValueError('%d irrep labels for %d irrep blocks' %
                             (len(irrep_name), len(dims)))
        self.irrep_name = tuple(str(x) for x in irrep_name)
        self.dims = numpy.asarray(dims, dtype=int)
        if numpy.any(self.dims < 0):
            raise ValueError('Negative irrep dimension in %s' % self.dims)

        self.so_offsets = numpy.append(0, numpy.cumsum(self.dims))
        self.so2irrep = numpy.repeat(numpy.arange(self.nirrep), self.dims)
        self.so2index = numpy.arange(self.nso) - self.so_offsets[self.so2irrep]
        npairs = self.dims * (self.dims + 1) // 2
        self.pair_offsets = numpy.append(0, numpy.cumsum(npairs))[:-1]
        self.npair = int(npairs.sum())

    @classmethod
    def c1(cls, nso, label='A'):
        '''No symmetry, all orbitals in one irrep'''
        return cls((label,), (nso,))

    @classmethod
    def from_orbsym(cls, irrep_name, orbsym):
        '''Build the descriptor from the irrep id of every SO.  The SOs must
        be ordered irrep by irrep.'''
        orbsym = numpy.asarray(orbsym, dtype=int)
        if orbsym.size > 1 and numpy.any(numpy.diff(orbsym) < 0):
            raise ValueError('SOs are not ordered by irreps: %s' % orbsym)
        dims = numpy.bincount(orbsym, minlength=len(irrep_name))
        return cls(irrep_name, dims)

    @property
    def nirrep(self):
        return len(self.irrep_name)

    @property
    def nso(self):
        return int(self.dims.sum())

    @property
    def pk_size(self):
        return self.npair * (self.npair + 1) // 2

    def __eq__(self, other):
        return (isinstance(other, SymmInfo) and
                self.irrep_name == other.irrep_name and
                numpy.array_equal(self.dims, other.dims))

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return 'SymmInfo(%s)' % ', '.join('%s:%d' % x for x in
                                          zip(self.irrep_name, self.dims))


def symm_adapt(ao_mat, symm_orb):
    '''Transform an AO matrix into SO blocks, C_h^T A C_h for every irrep h.

    Args:
        ao_mat : 2D array
        symm_orb : list of 2D arrays
            AO->SO coefficients, one (nao, dims[h]) block per irrep.

    Returns:
        list of 2D arrays
    '''
    return [c.T.dot(ao_mat).dot(c) for c in symm_orb]

def symm_adapt_eri(eri_ao, symm_orb):
    '''Transform the 4-index AO integrals (nao,nao,nao,nao) to the SO basis.
    The SO ordering follows the irrep blocks of symm_orb.'''
    c = numpy.hstack(symm_orb)
    return numpy.einsum('pqrs,pi,qj,rk,sl->ijkl', eri_ao, c, c, c, c,
                        optimize=True)
