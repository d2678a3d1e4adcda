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


import os
import tempfile
import unittest
import numpy
from pkscf import lib
from pkscf.lib.exceptions import PKMemoryError, ShapeMismatchError


class KnownValues(unittest.TestCase):
    def test_tril_index(self):
        self.assertEqual(lib.tril_index(2, 1), 4)
        self.assertEqual(lib.tril_index(1, 2), 4)
        self.assertEqual(lib.tril_index(0, 0), 0)
        self.assertEqual(lib.tril_index(3, 3), 9)

    def test_pack_unpack_tril(self):
        a = numpy.arange(9.).reshape(3,3)
        a = a + a.T
        tril = lib.pack_tril(a)
        self.assertEqual(tril.size, 6)
        b = lib.unpack_tril(tril, lib.numpy_helper.SYMMETRIC)
        self.assertTrue(numpy.array_equal(a, b))
        self.assertRaises(ValueError, lib.unpack_tril, numpy.ones(4))

    def test_index_tril_to_pair(self):
        i, j = lib.numpy_helper.index_tril_to_pair(numpy.arange(10))
        for ij in range(10):
            self.assertEqual(lib.tril_index(i[ij], j[ij]), ij)

    def test_prange(self):
        self.assertEqual(list(lib.prange(0, 10, 4)), [(0, 4), (4, 8), (8, 10)])

    def test_exceptions(self):
        err = PKMemoryError('too large', 100, 1)
        self.assertTrue(isinstance(err, MemoryError))
        self.assertEqual(err.nbytes, 100)
        self.assertTrue(issubclass(ShapeMismatchError, ValueError))

    def test_chkfile(self):
        ftmp = tempfile.NamedTemporaryFile()
        dat = {'a': numpy.arange(3), 'b': {'c': 1.5}, 'l': [numpy.eye(2), numpy.ones(3)]}
        lib.chkfile.dump(ftmp.name, 'dat', dat)
        lib.chkfile.dump(ftmp.name, 'x', 2.)
        dat1 = lib.chkfile.load(ftmp.name, 'dat')
        self.assertTrue(numpy.array_equal(dat1['a'], dat['a']))
        self.assertAlmostEqual(dat1['b']['c'], 1.5, 12)
        self.assertEqual(len(dat1['l']), 2)
        self.assertTrue(numpy.array_equal(dat1['l'][0], numpy.eye(2)))
        self.assertAlmostEqual(lib.chkfile.load(ftmp.name, 'x'), 2., 12)
        self.assertTrue(lib.chkfile.load(ftmp.name, 'nonexist') is None)

    def test_stream_object(self):
        class Dummy(lib.StreamObject):
            x = 1
            def kernel(self):
                self.y = self.x * 2
                return self.y
        obj = Dummy().set(x=3)
        self.assertEqual(obj.x, 3)
        self.assertEqual(obj.run().y, 6)

    def test_h5tmpfile(self):
        f = lib.H5TmpFile()
        fname = f.filename
        f['a'] = numpy.arange(3.)
        self.assertTrue(os.path.exists(fname))
        f.close()
        self.assertFalse(os.path.exists(fname))

    def test_logger(self):
        ftmp = tempfile.NamedTemporaryFile(mode='w+')
        with open(ftmp.name, 'w') as stdout:
            log = lib.logger.Logger(stdout, lib.logger.NOTE)
            log.note('note %d', 1)
            log.info('info %d', 2)
            log.debug('debug %d', 3)
            log.verbose = lib.logger.DEBUG
            log.debug('debug %d', 4)
            log.debug1('debug1 %d', 5)
            self.assertTrue(lib.logger.new_logger(None, log) is log)
        with open(ftmp.name) as f:
            out = f.read()
        self.assertEqual(out, 'note 1\ndebug 4\n')


class KnownValuesDIIS(unittest.TestCase):
    def test_ring_buffer(self):
        adiis = lib.diis.DIIS()
        adiis.space = 2
        for i in range(3):
            adiis.push(numpy.ones(4)*i, numpy.arange(4.)+i, tag=i)
        self.assertEqual(adiis.get_num_vec(), 2)
        self.assertEqual(adiis.tags(), [1, 2])
        adiis.push(numpy.ones(4)*3, numpy.arange(4.)+3, tag=3)
        self.assertEqual(adiis.tags(), [2, 3])
        self.assertTrue(numpy.array_equal(adiis.get_vec(0), numpy.ones(4)*2))

    def test_push_space1(self):
        adiis = lib.diis.DIIS()
        adiis.space = 1
        for i in range(4):
            adiis.push(numpy.ones(4)*i, numpy.arange(4.)+i, tag=i)
        self.assertEqual(adiis.get_num_vec(), 1)
        self.assertEqual(adiis.tags(), [3])
        self.assertTrue(numpy.array_equal(adiis.get_vec(0), numpy.ones(4)*3))

    def test_push_invalid_space(self):
        adiis = lib.diis.DIIS()
        adiis.space = 0
        self.assertRaises(ValueError, adiis.push, numpy.ones(2), numpy.ones(2))

    def test_extrapolate(self):
        adiis = lib.diis.DIIS()
        adiis.min_space = 2
        adiis.push(numpy.array([2., 0.]), numpy.array([1.]))
        self.assertTrue(adiis.extrapolate() is None)
        adiis.push(numpy.array([0., 4.]), numpy.array([-1.]))
        x = adiis.extrapolate()
        self.assertAlmostEqual(abs(x - numpy.array([1., 2.])).max(), 0, 12)

    def test_singular(self):
        adiis = lib.diis.DIIS()
        adiis.verbose = 0
        adiis.min_space = 2
        adiis.push(numpy.array([2., 0.]), numpy.array([1., 1.]))
        adiis.push(numpy.array([0., 4.]), numpy.array([1., 1.]))
        self.assertTrue(adiis.extrapolate() is None)

    def test_reset(self):
        adiis = lib.diis.DIIS()
        adiis.push(numpy.ones(2), numpy.ones(2), tag='a')
        adiis.reset()
        self.assertEqual(adiis.get_num_vec(), 0)
        self.assertEqual(adiis.tags(), [])

    def test_diis_file(self):
        ftmp = tempfile.NamedTemporaryFile()
        adiis = lib.diis.DIIS(filename=ftmp.name)
        adiis.min_space = 2
        adiis.push(numpy.array([2., 0.]), numpy.array([1.]))
        adiis.push(numpy.array([0., 4.]), numpy.array([-1.]))
        self.assertTrue('x1' in adiis._diisfile)
        x = adiis.extrapolate()
        self.assertAlmostEqual(abs(x - numpy.array([1., 2.])).max(), 0, 12)


if __name__ == "__main__":
    print("Full Tests for lib")
    unittest.main()
