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


import tempfile
import unittest
import numpy
from pkscf import gto
from pkscf import ao2mo
from pkscf.ao2mo import iwl

mol = gto.Mole()
mol.verbose = 0
mol.atom = 'H 0 0 0; H 0 0 1.4'
mol.build()


class KnownValues(unittest.TestCase):
    def test_canonical_quartets(self):
        labels = iwl.canonical_quartets(2)
        self.assertEqual(labels.shape, (6, 4))
        self.assertEqual(labels[0].tolist(), [0, 0, 0, 0])
        self.assertEqual(labels[1].tolist(), [1, 0, 0, 0])
        self.assertEqual(labels[-1].tolist(), [1, 1, 1, 1])
        self.assertEqual(len(iwl.canonical_quartets(3)), 21)

    def test_buffers(self):
        eri = ao2mo.so_eri(mol)
        buffers = list(ao2mo.from_eri(eri, buflen=4))
        self.assertEqual([len(b) for b in buffers], [4, 2])
        self.assertEqual([b.last_buffer for b in buffers], [False, True])
        for buf in buffers:
            for (p, q, r, s), v in zip(buf.labels, buf.values):
                self.assertAlmostEqual(v, eri[p,q,r,s], 14)

    def test_skip_small(self):
        buffers = list(ao2mo.from_eri(numpy.zeros((2,2,2,2))))
        self.assertEqual(len(buffers), 1)
        self.assertEqual(len(buffers[0]), 0)
        self.assertTrue(buffers[0].last_buffer)

    def test_reader(self):
        reader = ao2mo.IWLReader(ao2mo.from_eri(ao2mo.so_eri(mol), buflen=4))
        self.assertEqual(reader.buffer_count(), 1)
        self.assertEqual(len(reader.values()), 4)
        self.assertFalse(reader.last_buffer())
        quartets = list(reader)
        self.assertEqual(len(quartets), 6)
        self.assertEqual(quartets[0][:4], (0, 0, 0, 0))
        self.assertEqual(reader.buffer_count(), 2)
        self.assertTrue(reader.last_buffer())
        self.assertRaises(EOFError, reader.fetch)

    def test_reader_truncated(self):
        reader = ao2mo.IWLReader([ao2mo.IWLBuffer([[0,0,0,0]], [1.], False)])
        self.assertRaises(EOFError, reader.fetch)
        self.assertRaises(ValueError, ao2mo.IWLBuffer, [[0,0,0,0]], [1., 2.])

    def test_h5(self):
        ftmp = tempfile.NamedTemporaryFile()
        buffers = list(ao2mo.from_eri(ao2mo.so_eri(mol), buflen=4))
        self.assertEqual(ao2mo.write_h5(ftmp.name, buffers), 2)
        buffers1 = list(ao2mo.read_h5(ftmp.name))
        self.assertEqual(len(buffers1), 2)
        self.assertTrue(buffers1[1].last_buffer)
        for b0, b1 in zip(buffers, buffers1):
            self.assertTrue(numpy.array_equal(b0.labels, b1.labels))
            self.assertTrue(numpy.array_equal(b0.values, b1.values))

    def test_so_integrals(self):
        ftmp = tempfile.NamedTemporaryFile()
        ref = [b.values for b in ao2mo.so_integrals(mol)]
        dat = [b.values for b in ao2mo.so_integrals(mol, erifile=ftmp.name)]
        self.assertAlmostEqual(abs(numpy.hstack(ref) - numpy.hstack(dat)).max(), 0, 14)

    def test_so_eri_symmetry(self):
        r = numpy.sqrt(.5)
        mol1 = gto.M(atom='H 0 0 0; H 0 0 1.4', verbose=0,
                     symm_orb=[[[r], [r]], [[r], [-r]]], irrep_name=['Ag', 'B1u'])
        eri = ao2mo.so_eri(mol1)
        # (Ag Ag|Ag B1u) is symmetry forbidden
        self.assertAlmostEqual(eri[0,0,0,1], 0, 12)
        buffers = list(ao2mo.so_integrals(mol1))
        nint = sum(len(b) for b in buffers)
        self.assertEqual(nint, 4)


if __name__ == "__main__":
    print("Full Tests for ao2mo")
    unittest.main()
