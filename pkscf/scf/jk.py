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
Algorithms to build the two-electron parts Gc, Go of the ROHF Fock matrices

Only the in-core PK algorithm is available.  The other strategies are
declared so that they can be selected and reported, but they stop the
calculation with NotImplementedError.
'''

from enum import Enum
from pkscf.lib import logger
from pkscf.scf import _vhf


class JKStrategy(Enum):
    IN_CORE_PK = 'PK'
    OUT_OF_CORE = 'OUT_OF_CORE'
    DIRECT = 'DIRECT'
    DENSITY_FITTED = 'DF'

    @classmethod
    def from_string(cls, name):
        '''Convert the names PK, OUT_OF_CORE, DIRECT, DF (case insensitive)
        or the enum member names to JKStrategy'''
        if isinstance(name, cls):
            return name
        key = str(name).strip().upper()
        for s in cls:
            if key == s.value or key == s.name:
                return s
        raise ValueError('Unknown JK strategy %s. Available: %s' %
                         (name, ', '.join(s.value for s in cls)))


class JKBuilder:
    '''Interface of the Gc/Go builders.  :meth:`build` is called once before
    the SCF iterations, :meth:`get_g` in every cycle.'''
    strategy = None

    def __init__(self, verbose=logger.NOTE):
        self.verbose = verbose

    def build(self, mf):
        raise NotImplementedError('ROHF %s algorithm is not implemented'
                                  % self.strategy.value)

    def get_g(self, dm_closed, dm_open, gc=None, go=None):
        raise NotImplementedError('ROHF %s algorithm is not implemented'
                                  % self.strategy.value)


class InCorePKBuilder(JKBuilder):
    '''PK and K supermatrices held in memory'''
    strategy = JKStrategy.IN_CORE_PK

    def __init__(self, verbose=logger.NOTE):
        JKBuilder.__init__(self, verbose)
        self.pkmat = None

    def build(self, mf, reader=None):
        '''Read the SO integrals of mf.mol (or the given reader) into the PK
        supermatrices.

        Raises:
            PKMemoryError if the supermatrices exceed mf.max_memory
        '''
        if reader is None:
            reader = mf.get_integral_reader()
        self.pkmat = _vhf.make_pk(reader, mf.symm_info, mf.max_memory,
                                  self.verbose)
        return self

    def get_g(self, dm_closed, dm_open, gc=None, go=None):
        if self.pkmat is None:
            raise RuntimeError('%s.build has not been called' % self.__class__.__name__)
        return _vhf.get_jk_pk(self.pkmat, dm_closed, dm_open, gc, go)


class OutOfCoreBuilder(JKBuilder):
    strategy = JKStrategy.OUT_OF_CORE

class DirectBuilder(JKBuilder):
    strategy = JKStrategy.DIRECT

class DensityFittedBuilder(JKBuilder):
    strategy = JKStrategy.DENSITY_FITTED


_BUILDERS = {
    JKStrategy.IN_CORE_PK: InCorePKBuilder,
    JKStrategy.OUT_OF_CORE: OutOfCoreBuilder,
    JKStrategy.DIRECT: DirectBuilder,
    JKStrategy.DENSITY_FITTED: DensityFittedBuilder,
}

def new_builder(strategy, verbose=logger.NOTE):
    '''Create the builder for a JKStrategy or one of its names'''
    return _BUILDERS[JKStrategy.from_string(strategy)](verbose)
