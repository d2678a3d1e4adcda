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
from pkscf import gto
from pkscf import scf
from pkscf.scf import jk
from pkscf.scf.jk import JKStrategy
from pkscf.symm import SymmetryBlockedMatrix

mol = gto.M(atom='H 0 0 0; H 0 0 1.4', verbose=0)


class KnownValues(unittest.TestCase):
    def test_from_string(self):
        self.assertEqual(JKStrategy.from_string('PK'), JKStrategy.IN_CORE_PK)
        self.assertEqual(JKStrategy.from_string('pk'), JKStrategy.IN_CORE_PK)
        self.assertEqual(JKStrategy.from_string('df'), JKStrategy.DENSITY_FITTED)
        self.assertEqual(JKStrategy.from_string('direct'), JKStrategy.DIRECT)
        self.assertEqual(JKStrategy.from_string('out_of_core'), JKStrategy.OUT_OF_CORE)
        self.assertEqual(JKStrategy.from_string(JKStrategy.DIRECT), JKStrategy.DIRECT)
        self.assertRaises(ValueError, JKStrategy.from_string, 'RI')

    def test_new_builder(self):
        self.assertTrue(isinstance(jk.new_builder('PK'), jk.InCorePKBuilder))
        self.assertTrue(isinstance(jk.new_builder('DF'), jk.DensityFittedBuilder))
        self.assertTrue(isinstance(jk.new_builder(JKStrategy.OUT_OF_CORE),
                                   jk.OutOfCoreBuilder))

    def test_not_implemented(self):
        mf = scf.ROHF(mol)
        mf.build()
        for name in ('OUT_OF_CORE', 'DIRECT', 'DF'):
            builder = jk.new_builder(name, 0)
            self.assertRaises(NotImplementedError, builder.build, mf)
            dm = SymmetryBlockedMatrix(mf.symm_info)
            self.assertRaises(NotImplementedError, builder.get_g, dm, dm)

    def test_in_core_pk(self):
        mf = scf.ROHF(mol)
        mf.build()
        builder = jk.new_builder('PK', 0)
        dm = SymmetryBlockedMatrix.identity(mf.symm_info)
        self.assertRaises(RuntimeError, builder.get_g, dm, dm)
        builder.build(mf)
        self.assertTrue(builder.pkmat.finalized)
        gc, go = builder.get_g(dm, dm.like())
        self.assertAlmostEqual(gc.rms(go.copy().scale(2)), 0, 12)


if __name__ == "__main__":
    print("Full Tests for JK builders")
    unittest.main()
