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
Block structure of symmetry-adapted orbital spaces
'''

from pkscf.symm import basis
from pkscf.symm import blockmat
from pkscf.symm.basis import SymmInfo, symm_adapt, symm_adapt_eri
from pkscf.symm.blockmat import SymmetryBlockedMatrix, BlockedVector
