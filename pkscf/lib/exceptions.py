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
Exceptions raised by the SCF core
'''

class PKSCFError(Exception):
    pass

class ShapeMismatchError(PKSCFError, ValueError):
    '''Matrices with different symmetry-block structures were combined'''
    pass

class IrrepIndexError(PKSCFError, IndexError):
    '''Element access outside the dimension of an irrep block'''
    pass

class PKMemoryError(PKSCFError, MemoryError):
    '''The in-core PK and K supermatrices do not fit in max_memory'''
    def __init__(self, msg, nbytes=None, max_memory=None):
        PKSCFError.__init__(self, msg)
        self.nbytes = nbytes
        self.max_memory = max_memory

class OccupationError(PKSCFError, ValueError):
    pass
