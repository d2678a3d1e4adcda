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
from pkscf import ao2mo
from pkscf.symm import SymmInfo, SymmetryBlockedMatrix
from pkscf.scf import _vhf
from pkscf.lib.exceptions import PKMemoryError

r = numpy.sqrt(.5)
# linear H3, the SOs are ordered Ag, Ag, B1u
mol = gto.M(atom='H 0 0 -1.7; H 0 0 0; H 0 0 1.7', spin=1, verbose=0,
            symm_orb=[[[r, 0], [0, 1], [r, 0]], [[r], [0], [-r]]],
            irrep_name=['Ag', 'B1u'])
symm_info = mol.symm_info()

def reader_of(mol, buflen=5):
    return ao2mo.IWLReader(ao2mo.so_integrals(mol, buflen=buflen))

def random_density(dims, seed):
    numpy.random.seed(seed)
    blocks = []
    for n in dims:
        c = numpy.random.random((n, 1)) - .5
        blocks.append(c.dot(c.T) + numpy.eye(n) * .1)
    return SymmetryBlockedMatrix.from_blocks(blocks)

def get_g_dense(eri, dc, do):
    def get_jk(dm):
        vj = numpy.einsum('pqrs,rs->pq', eri, dm)
        vk = numpy.einsum('prqs,rs->pq', eri, dm)
        return vj, vk
    jc, kc = get_jk(dc)
    jo, ko = get_jk(do)
    gc = 2*jc - kc + jo - .5*ko
    go = jc - .5*kc + .5*(jo - ko)
    return gc, go


class KnownValues(unittest.TestCase):
    def test_single_quartet(self):
        info = SymmInfo(('A',), (1,))
        buf = ao2mo.IWLBuffer([[0,0,0,0]], [2.], True)
        pkmat = _vhf.PKSupermatrix(info)
        pkmat.accumulate(ao2mo.IWLReader([buf]))
        # Coulomb alone would give PK[0,0] = v = 2; the first exchange sort
        # subtracts 0.5*v, leaving 0.5*v before the diagonal is halved
        self.assertAlmostEqual(pkmat.pk[0], 1., 14)
        self.assertAlmostEqual(pkmat.k[0], -1., 14)
        pkmat.finalize()
        self.assertAlmostEqual(pkmat.pk[0], .5, 14)
        self.assertAlmostEqual(pkmat.k[0], -.5, 14)
        self.assertRaises(RuntimeError, pkmat.finalize)
        self.assertRaises(RuntimeError, pkmat.accumulate, ao2mo.IWLReader([buf]))

    def test_zero_dim_irrep(self):
        info = SymmInfo(('A1', 'A2', 'B1'), (1, 0, 1))
        self.assertEqual(info.npair, 2)
        buf = ao2mo.IWLBuffer([[1,1,0,0]], [1.], True)
        pkmat = _vhf.make_pk(ao2mo.IWLReader([buf]), info, verbose=0)
        # Coulomb (11|00) goes to PK[1,0]; the exchange (10|10) couples
        # different irreps and is not a PK element
        self.assertAlmostEqual(pkmat.pk[1], 1., 14)
        self.assertAlmostEqual(pkmat.k[1], 0., 14)

    def test_memory(self):
        self.assertEqual(_vhf.estimate_pk_nbytes(symm_info), 2 * 10 * 8)
        self.assertRaises(PKMemoryError, _vhf.check_pk_memory, symm_info, 1e-6)
        self.assertRaises(PKMemoryError, _vhf.make_pk, reader_of(mol), symm_info, 1e-6, 0)

    def test_pack_density(self):
        dm = random_density((2, 1), 3)
        vec = _vhf.pack_density(dm)
        self.assertEqual(vec.size, 4)
        self.assertAlmostEqual(vec[1], 2 * dm.blocks[0][1,0], 14)
        self.assertAlmostEqual(vec[2], dm.blocks[0][1,1], 14)
        g = _vhf.unpack_g(vec, (2, 1))
        self.assertAlmostEqual(g.blocks[0][0,1], 4 * dm.blocks[0][1,0], 14)

    def test_get_jk_pk(self):
        pkmat = _vhf.make_pk(reader_of(mol), symm_info, verbose=0)
        self.assertEqual(pkmat.nint, 13)
        dc = random_density(symm_info.dims, 1)
        do = random_density(symm_info.dims, 2)
        gc, go = _vhf.get_jk_pk(pkmat, dc, do)

        eri = ao2mo.so_eri(mol)
        gc_ref, go_ref = get_g_dense(eri, dc.to_block_matrix(), do.to_block_matrix())
        self.assertAlmostEqual(abs(gc.to_block_matrix() - gc_ref).max(), 0, 10)
        self.assertAlmostEqual(abs(go.to_block_matrix() - go_ref).max(), 0, 10)

    def test_get_jk_pk_c1(self):
        mol1 = gto.M(atom='H 0 0 -1.7; H 0 0 0; H 0 0 1.7', spin=1, verbose=0)
        info = mol1.symm_info()
        pkmat = _vhf.make_pk(reader_of(mol1, 4), info, verbose=0)
        dc = random_density(info.dims, 4)
        do = random_density(info.dims, 5)
        gc = dc.like()
        go = dc.like()
        gc1, go1 = _vhf.get_jk_pk(pkmat, dc, do, gc, go)
        self.assertTrue(gc1 is gc)
        gc_ref, go_ref = get_g_dense(ao2mo.so_eri(mol1), dc.blocks[0], do.blocks[0])
        self.assertAlmostEqual(abs(gc.blocks[0] - gc_ref).max(), 0, 10)
        self.assertAlmostEqual(abs(go.blocks[0] - go_ref).max(), 0, 10)

    def test_closed_shell_limit(self):
        # with Do = 0, Gc = 2J - K and Go = J - K/2
        pkmat = _vhf.make_pk(reader_of(mol), symm_info, verbose=0)
        dc = random_density(symm_info.dims, 6)
        do = dc.like()
        gc, go = _vhf.get_jk_pk(pkmat, dc, do)
        self.assertAlmostEqual(gc.rms(go.copy().scale(2)), 0, 12)

    def test_not_finalized(self):
        pkmat = _vhf.PKSupermatrix(symm_info)
        dm = SymmetryBlockedMatrix(symm_info)
        self.assertRaises(RuntimeError, _vhf.get_jk_pk, pkmat, dm, dm)
        pkmat.finalize()
        from pkscf.lib.exceptions import ShapeMismatchError
        self.assertRaises(ShapeMismatchError, _vhf.get_jk_pk, pkmat,
                          SymmetryBlockedMatrix((3,)), dm)


if __name__ == "__main__":
    print("Full Tests for PK supermatrix")
    unittest.main()
