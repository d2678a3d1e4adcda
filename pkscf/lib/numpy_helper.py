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
Extension to numpy module
'''

import numpy

PLAIN = 0
HERMITIAN = 1
ANTIHERMI = 2
SYMMETRIC = 3


def tril_index(i, j):
    '''Compound index of the pair (i,j) in the lower-triangular packing.
    The pair is unordered, tril_index(i,j) == tril_index(j,i).

    Examples:

    >>> tril_index(2, 1)
    4
    >>> tril_index(1, 2)
    4
    '''
    if i >= j:
        return i*(i+1)//2 + j
    else:
        return j*(j+1)//2 + i

def index_tril_to_pair(ij):
    '''Given tril-index ij, compute the pair indices (i,j) which satisfy
    ij = i * (i+1) / 2 + j
    '''
    i = (numpy.sqrt(2*ij+.25) - .5 + 1e-7).astype(int)
    j = ij - i*(i+1)//2
    return i, j

# 2d -> 1d
def pack_tril(mat, out=None):
    '''flatten the lower triangular part of a matrix.
    Given mat, it returns mat[numpy.tril_indices(mat.shape[0])]

    Examples:

    >>> pack_tril(numpy.arange(9).reshape(3,3))
    [0 3 4 6 7 8]
    '''
    mat = numpy.asarray(mat)
    nd = mat.shape[0]
    if out is None:
        return mat[numpy.tril_indices(nd)]
    out[:] = mat[numpy.tril_indices(nd)]
    return out

# 1d -> 2d, write hermitian lower triangle to upper triangle
def unpack_tril(tril, filltriu=HERMITIAN, out=None):
    '''Reversed operation of pack_tril.

    Kwargs:
        filltriu : int

            | 0           Do not fill the upper triangular part
            | 1 (default) Transpose the lower triangular part to fill the upper triangular part
            | 2           Similar to filltriu=1, negative of the lower triangular part is assign
                          to the upper triangular part to make the matrix anti-hermitian

    Examples:

    >>> unpack_tril(numpy.arange(6.))
    [[ 0. 1. 3.]
     [ 1. 2. 4.]
     [ 3. 4. 5.]]
    '''
    tril = numpy.asarray(tril)
    nd = int(numpy.sqrt(tril.size*2))
    if nd*(nd+1)//2 != tril.size:
        raise ValueError('%d is not the size of a packed triangle' % tril.size)
    if out is None:
        out = numpy.zeros((nd,nd), dtype=tril.dtype)
    else:
        out[:] = 0
    idx, idy = numpy.tril_indices(nd)
    out[idx,idy] = tril
    if filltriu == HERMITIAN or filltriu == SYMMETRIC:
        out[idy,idx] = tril.conj() if filltriu == HERMITIAN else tril
    elif filltriu == ANTIHERMI:
        out[idy,idx] = -tril.conj()
        diag = idx == idy
        out[idx[diag],idx[diag]] = tril[diag]
    return out
