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
DIIS for the ROHF effective Fock matrix
"""

import numpy
from pkscf import lib
from pkscf.lib import logger


def get_err_vec(fock_eff, mo_coeff, s_half):
    '''Error matrix of the effective Fock matrix in the orthonormal SO basis

        e = S^{1/2} C offdiag(Feff) C^T S^{1/2}

    The effective Fock matrix is diagonal in the MO basis at convergence.
    '''
    err = fock_eff.copy()
    err.zero_diagonal()
    err.back_transform(mo_coeff)
    err.transform(s_half)
    return err

def fock_to_orth(fock_eff, mo_coeff, s_half):
    '''S^{1/2} C Feff C^T S^{1/2}'''
    f = fock_eff.copy()
    f.back_transform(mo_coeff)
    f.transform(s_half)
    return f

def fock_from_orth(fock_orth, mo_coeff, s_half, out=None):
    '''Inverse of :func:`fock_to_orth`, C^T S^{1/2} F S^{1/2} C'''
    if out is None:
        out = fock_orth.like()
    out.copy(fock_orth)
    out.transform(s_half)
    out.transform(mo_coeff)
    return out


class ROHFDIIS(lib.diis.DIIS):
    '''DIIS on the effective Fock matrix.  The matrices of different cycles
    are stored in the orthonormal SO basis, which does not depend on the
    orbitals of the cycle.
    '''
    def __init__(self, mf=None, filename=None):
        lib.diis.DIIS.__init__(self, mf, filename)
        if mf is not None:
            self.space = mf.diis_space
            self.min_space = mf.diis_start_cycle

    def record(self, fock_eff, mo_coeff, s_half, tag=None):
        errvec = get_err_vec(fock_eff, mo_coeff, s_half)
        logger.debug1(self, 'diis-norm(errvec)=%g', numpy.linalg.norm(errvec.ravel()))
        f = fock_to_orth(fock_eff, mo_coeff, s_half)
        return self.push(f.ravel(), errvec.ravel(), tag)

    def extrapolate(self, fock_eff=None, mo_coeff=None, s_half=None):
        '''Without arguments, return the extrapolated vector like
        :meth:`lib.diis.DIIS.extrapolate`.  Otherwise write the extrapolated
        effective Fock matrix in the MO basis of mo_coeff into fock_eff.

        Returns:
            True if fock_eff was updated.  On failure fock_eff is unchanged.
        '''
        xnew = lib.diis.DIIS.extrapolate(self)
        if fock_eff is None:
            return xnew
        if xnew is None:
            return False
        f = fock_eff.like()
        f.set_vector(xnew)
        fock_from_orth(f, mo_coeff, s_half, out=fock_eff)
        return True

SCFDIIS = DIIS = ROHFDIIS
