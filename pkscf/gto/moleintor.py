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
Integrals over contracted s-type Gaussian functions

Each shell is a tuple (atom_id, exponents, coefficients) where the
coefficients already include the normalization of the primitives.  Only
l=0 functions are supported, which is enough to feed the SCF core with
small test molecules (H, He, H2, H3, ...).

Ref: A. Szabo and N. S. Ostlund, Modern Quantum Chemistry, Appendix A.
'''

import numpy
import scipy.special


def boys_f0(t):
    r'''Boys function of order 0

    .. math::

        F_0(t) = \int_0^1 e^{-t u^2} du = \frac{1}{2}\sqrt{\pi/t}\,\mathrm{erf}(\sqrt{t})
    '''
    t = numpy.asarray(t, dtype=numpy.double)
    out = numpy.ones_like(t)
    small = t < 1e-12
    out[small] = 1 - t[small] / 3
    ts = t[~small]
    out[~small] = .5 * numpy.sqrt(numpy.pi / ts) * scipy.special.erf(numpy.sqrt(ts))
    return out

def gto_norm(expnt):
    '''Normalization factor of the primitive s function exp(-a r^2)'''
    return (2 * numpy.asarray(expnt) / numpy.pi) ** .75

def _pair_data(bas, coords, i, j):
    ia, ai, ci = bas[i]
    ja, aj, cj = bas[j]
    ra = coords[ia]
    rb = coords[ja]
    p = ai[:,None] + aj[None,:]
    mu = ai[:,None] * aj[None,:] / p
    rab2 = numpy.dot(ra - rb, ra - rb)
    cc = ci[:,None] * cj[None,:]
    # Gaussian product centers, shape (npi,npj,3)
    rp = (ai[:,None,None] * ra + aj[None,:,None] * rb) / p[:,:,None]
    return p, mu, rab2, cc, rp

def int1e_ovlp(bas, coords):
    nbas = len(bas)
    s = numpy.empty((nbas,nbas))
    for i in range(nbas):
        for j in range(i+1):
            p, mu, rab2, cc, rp = _pair_data(bas, coords, i, j)
            s[i,j] = s[j,i] = (cc * (numpy.pi/p)**1.5 * numpy.exp(-mu*rab2)).sum()
    return s

def int1e_kin(bas, coords):
    nbas = len(bas)
    t = numpy.empty((nbas,nbas))
    for i in range(nbas):
        for j in range(i+1):
            p, mu, rab2, cc, rp = _pair_data(bas, coords, i, j)
            sp = (numpy.pi/p)**1.5 * numpy.exp(-mu*rab2)
            t[i,j] = t[j,i] = (cc * mu * (3 - 2*mu*rab2) * sp).sum()
    return t

def int1e_nuc(bas, coords, charges):
    nbas = len(bas)
    v = numpy.zeros((nbas,nbas))
    for i in range(nbas):
        for j in range(i+1):
            p, mu, rab2, cc, rp = _pair_data(bas, coords, i, j)
            pre = cc * 2*numpy.pi/p * numpy.exp(-mu*rab2)
            val = 0
            for z, rc in zip(charges, coords):
                rpc2 = ((rp - rc)**2).sum(axis=2)
                val -= z * (pre * boys_f0(p*rpc2)).sum()
            v[i,j] = v[j,i] = val
    return v

def int2e(bas, coords):
    '''Electron repulsion integrals (ij|kl) in chemists' notation, returned
    as a full (n,n,n,n) array'''
    nbas = len(bas)
    eri = numpy.empty((nbas,)*4)
    pairs = {}
    for i in range(nbas):
        for j in range(i+1):
            pairs[i,j] = _pair_data(bas, coords, i, j)

    for i in range(nbas):
        for j in range(i+1):
            ij = i*(i+1)//2 + j
            p, mu, rab2, cij, rp = pairs[i,j]
            kab = cij * numpy.exp(-mu*rab2)
            for k in range(i+1):
                for l in range(k+1):
                    kl = k*(k+1)//2 + l
                    if kl > ij:
                        continue
                    q, nu, rcd2, ckl, rq = pairs[k,l]
                    kcd = ckl * numpy.exp(-nu*rcd2)
                    # indices (a,b) for the bra primitives, (c,d) for the ket
                    pq = p[:,:,None,None] * q[None,None,:,:]
                    ppq = p[:,:,None,None] + q[None,None,:,:]
                    rpq2 = ((rp[:,:,None,None,:] - rq[None,None,:,:,:])**2).sum(axis=4)
                    val = (2 * numpy.pi**2.5 / (pq * numpy.sqrt(ppq))
                           * kab[:,:,None,None] * kcd[None,None,:,:]
                           * boys_f0(pq/ppq * rpq2)).sum()
                    eri[i,j,k,l] = eri[j,i,k,l] = eri[i,j,l,k] = eri[j,i,l,k] = val
                    eri[k,l,i,j] = eri[l,k,i,j] = eri[k,l,j,i] = eri[l,k,j,i] = val
    return eri


_INTOR = {
    'int1e_ovlp': lambda bas, coords, charges: int1e_ovlp(bas, coords),
    'int1e_kin' : lambda bas, coords, charges: int1e_kin(bas, coords),
    'int1e_nuc' : int1e_nuc,
    'int2e'     : lambda bas, coords, charges: int2e(bas, coords),
}

def getints(intor_name, bas, coords, charges):
    '''1e and 2e integral generator.

    Args:
        intor_name : str

            ================  =====================
            Function          Expression
            ================  =====================
            "int1e_ovlp"      ( \\| \\)
            "int1e_kin"       (.5 \\| p dot p\\)
            "int1e_nuc"       ( \\| nuc \\| \\)
            "int2e"           ( \\, \\| \\, \\)
            ================  =====================

            The suffix "_sph" or "_cart" is accepted and ignored.

        bas : list of (atom_id, exponents, coefficients)
        coords : (natm,3) ndarray
        charges : (natm,) ndarray

    Returns:
        ndarray of integrals, 2-dim for 1-electron and 4-dim for 2-electron
        integrals.
    '''
    key = intor_name
    for suffix in ('_sph', '_cart'):
        if key.endswith(suffix):
            key = key[:-len(suffix)]
    if key not in _INTOR:
        raise KeyError('Unknown integral type %s' % intor_name)
    coords = numpy.asarray(coords, dtype=numpy.double).reshape(-1,3)
    charges = numpy.asarray(charges, dtype=numpy.double)
    return _INTOR[key](bas, coords, charges)
