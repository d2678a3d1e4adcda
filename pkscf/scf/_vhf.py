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
PK and K supermatrices

For the symmetry-allowed orbital pairs pq (p>=q, both in irrep h) the
pairs are numbered irrep by irrep, pq_global = pair_offsets[h] + pq.  The
supermatrices are stored as the packed lower triangle over the pair indices,

    PK[pq,rs] = (pq|rs) - 1/4 [(pr|qs) + (ps|qr)]
    K [pq,rs] =         - 1/4 [(pr|qs) + (ps|qr)]

with the diagonal entries halved, so that a contraction which visits every
pq>=rs element and updates both G[pq] and G[rs] gives the full
symmetric product.  With closed and open shell densities Dc and Do

    Gc = 2J[Dc] - K[Dc] + J[Do] - 1/2 K[Do]
    Go = J[Dc] - 1/2 K[Dc] + 1/2 (J[Do] - K[Do])
'''

import numpy
from pkscf import lib
from pkscf.lib import logger
from pkscf.lib.exceptions import PKMemoryError
from pkscf.symm.blockmat import SymmetryBlockedMatrix


def estimate_pk_nbytes(symm_info):
    '''Memory (in bytes) of the PK and K arrays'''
    return 2 * symm_info.pk_size * 8

def check_pk_memory(symm_info, max_memory):
    '''Raise PKMemoryError if PK and K do not fit in max_memory (MB)'''
    nbytes = estimate_pk_nbytes(symm_info)
    if nbytes > max_memory * 1e6:
        raise PKMemoryError('PK and K supermatrices need %.2f MB, max_memory %.2f MB'
                            % (nbytes*1e-6, max_memory), nbytes, max_memory)
    return nbytes


class PKSupermatrix:
    '''Packed PK and K supermatrices of an SO basis

    Args:
        symm_info : SymmInfo

    Attributes:
        pk, k : 1D arrays of length symm_info.pk_size
        nint : int
            Number of integrals processed by :meth:`accumulate`
    '''
    def __init__(self, symm_info):
        self.symm_info = symm_info
        self.pk = numpy.zeros(symm_info.pk_size)
        self.k = numpy.zeros(symm_info.pk_size)
        self.nint = 0
        self._finalized = False

    @property
    def npair(self):
        return self.symm_info.npair

    @property
    def nbytes(self):
        return self.pk.nbytes + self.k.nbytes

    def accumulate(self, reader):
        '''Sort the integrals of all remaining buffers of an
        :class:`IWLReader` into PK and K'''
        if self._finalized:
            raise RuntimeError('PK supermatrix is already finalized')
        for buf in reader.buffers():
            self._sort_buffer(buf.labels, buf.values)
        return self

    def _sort_buffer(self, labels, values):
        info = self.symm_info
        so2irrep = info.so2irrep
        so2index = info.so2index
        offsets = info.pair_offsets
        pk = self.pk
        k = self.k
        for (i, j, kk, l), v in zip(labels, values):
            ih, jh, kh, lh = so2irrep[i], so2irrep[j], so2irrep[kk], so2irrep[l]
            ii, jj, ki, li = so2index[i], so2index[j], so2index[kk], so2index[l]

            # Coulomb
            if ih == jh and kh == lh:
                bra = lib.tril_index(ii, jj) + offsets[ih]
                ket = lib.tril_index(ki, li) + offsets[kh]
                pk[lib.tril_index(bra, ket)] += v

            # exchange, (ik|jl)
            if ih == kh and jh == lh:
                bra = lib.tril_index(ii, ki) + offsets[ih]
                ket = lib.tril_index(jj, li) + offsets[jh]
                braket = lib.tril_index(bra, ket)
                if ii == ki or jj == li:
                    val = .5 * v
                else:
                    val = .25 * v
                pk[braket] -= val
                k[braket] -= val

            # exchange, (il|jk). It is the same as (ik|jl) if i==j or k==l
            if i != j and kk != l and ih == lh and jh == kh:
                bra = lib.tril_index(ii, li) + offsets[ih]
                ket = lib.tril_index(jj, ki) + offsets[jh]
                braket = lib.tril_index(bra, ket)
                if ii == li or jj == ki:
                    val = .5 * v
                else:
                    val = .25 * v
                pk[braket] -= val
                k[braket] -= val
        self.nint += len(values)

    def finalize(self):
        '''Halve the diagonal elements PK[pq,pq] and K[pq,pq]'''
        if self._finalized:
            raise RuntimeError('PK supermatrix is already finalized')
        diag = numpy.arange(self.npair)
        diag = diag * (diag + 1) // 2 + diag
        self.pk[diag] *= .5
        self.k[diag] *= .5
        self._finalized = True
        return self

    @property
    def finalized(self):
        return self._finalized


def make_pk(reader, symm_info, max_memory=lib.param.MAX_MEMORY, verbose=None):
    '''Build the PK and K supermatrices from an integral stream.

    Raises:
        PKMemoryError if the arrays do not fit in max_memory (MB)
    '''
    if isinstance(verbose, logger.Logger):
        log = verbose
    else:
        log = logger.Logger(verbose=logger.NOTE if verbose is None else verbose)
    t0 = (logger.process_clock(), logger.perf_counter())
    nbytes = check_pk_memory(symm_info, max_memory)
    log.info('PK supermatrix: %d pairs, %.2f MB', symm_info.npair, nbytes*1e-6)

    log.note('Forming PK and K matrices.')
    pkmat = PKSupermatrix(symm_info)
    pkmat.accumulate(reader)
    pkmat.finalize()
    log.note('Processed %d two-electron integrals in %d buffers.',
             pkmat.nint, reader.buffer_count())
    log.timer('PK supermatrix', *t0)
    return pkmat


def pack_density(dm, out=None):
    '''Fold the lower triangle of every irrep block of a symmetric
    SymmetryBlockedMatrix into one packed vector, off-diagonal elements are
    doubled.'''
    npair = int((dm.dims * (dm.dims + 1) // 2).sum())
    if out is None:
        out = numpy.empty(npair)
    p0 = 0
    for b in dm.blocks:
        n = b.shape[0]
        idx, idy = numpy.tril_indices(n)
        p1 = p0 + idx.size
        out[p0:p1] = b[idx,idy]
        out[p0:p1][idx != idy] *= 2
        p0 = p1
    return out

def unpack_g(vec, dims, out=None):
    '''Expand a packed G vector to a symmetric SymmetryBlockedMatrix,
    scaled by 2'''
    if out is None:
        out = SymmetryBlockedMatrix(dims)
    p0 = 0
    for b in out.blocks:
        n = b.shape[0]
        p1 = p0 + n * (n + 1) // 2
        lib.unpack_tril(vec[p0:p1] * 2, lib.numpy_helper.SYMMETRIC, out=b)
        p0 = p1
    return out

def contract_pk(pk, k, dc, do):
    '''Contract the packed PK and K supermatrices with packed closed and
    open shell densities.

    Returns:
        Packed vectors gc, go
    '''
    npair = dc.size
    if pk.size != npair * (npair + 1) // 2:
        raise ValueError('PK of size %d does not match %d pairs' % (pk.size, npair))
    gc = numpy.zeros(npair)
    go = numpy.zeros(npair)
    p0 = 0
    for pq in range(npair):
        p1 = p0 + pq + 1
        pk_row = pk[p0:p1]
        x_row = pk_row + k[p0:p1]
        dc_rs = dc[:pq+1]
        do_rs = do[:pq+1]
        # the elements rs <= pq.  Both G[pq] and G[rs] are updated
        gc[pq] += pk_row.dot(dc_rs) + .5 * pk_row.dot(do_rs)
        gc[:pq+1] += pk_row * (dc[pq] + .5 * do[pq])
        go[pq] += .5 * pk_row.dot(dc_rs) + .25 * x_row.dot(do_rs)
        go[:pq+1] += .5 * pk_row * dc[pq] + .25 * x_row * do[pq]
        p0 = p1
    return gc, go

def get_jk_pk(pkmat, dm_closed, dm_open, gc=None, go=None):
    '''Two-electron parts of the closed and open shell Fock matrices

    Args:
        pkmat : PKSupermatrix
        dm_closed, dm_open : SymmetryBlockedMatrix

    Kwargs:
        gc, go : SymmetryBlockedMatrix
            Output matrices.  New objects are created if not given.

    Returns:
        gc, go : SymmetryBlockedMatrix
    '''
    dm_closed.check_shape(pkmat.symm_info)
    dm_open.check_shape(pkmat.symm_info)
    if not pkmat.finalized:
        raise RuntimeError('PK supermatrix is not finalized')
    dc = pack_density(dm_closed)
    do = pack_density(dm_open)
    gc_vec, go_vec = contract_pk(pkmat.pk, pkmat.k, dc, do)
    gc = unpack_g(gc_vec, pkmat.symm_info, gc)
    go = unpack_g(go_vec, pkmat.symm_info, go)
    return gc, go
