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
Restricted open-shell Hartree-Fock
==================================

Simple usage::

    >>> from pkscf import gto, scf
    >>> mol = gto.M(atom='H 0 0 0; H 0 0 1.4', charge=1, spin=1)
    >>> mf = scf.ROHF(mol).run()
'''

from pkscf.scf import _vhf
from pkscf.scf import jk
from pkscf.scf import diis
from pkscf.scf import chkfile
from pkscf.scf import rohf
from pkscf.scf.jk import JKStrategy
from pkscf.scf.rohf import SCFState


def ROHF(mol, *args):
    return rohf.ROHF(mol, *args)
