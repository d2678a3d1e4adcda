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


import unittest
import numpy
from pkscf import gto
from pkscf import scf
from pkscf.scf import diis
from pkscf.scf import rohf
from pkscf.symm import SymmetryBlockedMatrix

mol = gto.M(atom='H 0 0 -1.7; H 0 0 0; H 0 0 1.7', spin=1, verbose=0)

def make_mf():
    mf = scf.ROHF(mol)
    mf.build()
    mf.init_guess_orbitals()
    return mf

def random_symmetric(dims, seed):
    numpy.random.seed(seed)
    blocks = []
    for n in dims:
        a = numpy.random.random((n,n))
        blocks.append(a + a.T)
    return SymmetryBlockedMatrix.from_blocks(blocks)


class KnownValues(unittest.TestCase):
    def test_orthonormal_orbitals(self):
        mf = make_mf()
        c = mf.mo_coeff
        cSc = mf.ovlp.copy().transform(c)
        self.assertAlmostEqual(cSc.rms(SymmetryBlockedMatrix.identity(cSc.dims)), 0, 10)

    def test_err_vec(self):
        mf = make_mf()
        f = SymmetryBlockedMatrix.from_blocks([numpy.diag([-1., 0., 1.])])
        err = diis.get_err_vec(f, mf.mo_coeff, mf.s_half)
        self.assertAlmostEqual(err.rms(), 0, 14)
        f.set(0, 1, 0, .2)
        f.set(0, 0, 1, .2)
        err = diis.get_err_vec(f, mf.mo_coeff, mf.s_half)
        self.assertTrue(err.rms() > 1e-3)

    def test_orth_round_trip(self):
        mf = make_mf()
        f = random_symmetric(mf.symm_info.dims, 7)
        f_orth = diis.fock_to_orth(f, mf.mo_coeff, mf.s_half)
        f1 = diis.fock_from_orth(f_orth, mf.mo_coeff, mf.s_half)
        self.assertAlmostEqual(f1.rms(f), 0, 10)

    def test_history(self):
        mf = make_mf()
        mf.diis_space = 2
        adiis = diis.ROHFDIIS(mf)
        self.assertEqual(adiis.space, 2)
        self.assertEqual(adiis.min_space, mf.diis_start_cycle)
        for cycle in range(1, 4):
            f = random_symmetric(mf.symm_info.dims, cycle)
            adiis.record(f, mf.mo_coeff, mf.s_half, tag=cycle)
        self.assertEqual(adiis.tags(), [2, 3])

    def test_extrapolate_failure(self):
        mf = make_mf()
        adiis = diis.ROHFDIIS(mf)
        adiis.verbose = 0
        adiis.min_space = 1
        f = SymmetryBlockedMatrix.from_blocks([numpy.diag([-1., 0., 1.])])
        adiis.record(f, mf.mo_coeff, mf.s_half)
        # zero error vectors cannot be extrapolated
        f1 = f.copy()
        self.assertFalse(adiis.extrapolate(f1, mf.mo_coeff, mf.s_half))
        self.assertAlmostEqual(f1.rms(f), 0, 14)

    def test_extrapolate(self):
        mf = make_mf()
        adiis = diis.ROHFDIIS(mf)
        adiis.min_space = 2
        f0 = SymmetryBlockedMatrix.from_blocks([numpy.diag([-1., 0., 1.])])
        f1 = f0.copy()
        f0.set(0, 1, 0, .1)
        f0.set(0, 0, 1, .1)
        f1.set(0, 1, 0, -.1)
        f1.set(0, 0, 1, -.1)
        adiis.record(f0, mf.mo_coeff, mf.s_half)
        adiis.record(f1, mf.mo_coeff, mf.s_half)
        fnew = f0.like()
        self.assertTrue(adiis.extrapolate(fnew, mf.mo_coeff, mf.s_half))
        # the error vectors cancel with equal weights
        ref = numpy.diag([-1., 0., 1.])
        self.assertAlmostEqual(abs(fnew.blocks[0] - ref).max(), 0, 10)

    def test_roothaan_fock_is_diis_ready(self):
        mf = make_mf()
        fc = random_symmetric(mf.symm_info.dims, 8)
        fo = random_symmetric(mf.symm_info.dims, 9)
        feff = rohf.get_roothaan_fock(fc, fo, [1], [1])
        err = diis.get_err_vec(feff, mf.mo_coeff, mf.s_half)
        err_mat = err.blocks[0]
        self.assertAlmostEqual(abs(err_mat - err_mat.T).max(), 0, 12)


if __name__ == "__main__":
    print("Full Tests for ROHF DIIS")
    unittest.main()
