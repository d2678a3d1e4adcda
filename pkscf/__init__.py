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
*****************************************************************
PKSCF  restricted open-shell SCF on symmetry-packed PK supermatrices
*****************************************************************

The package solves the restricted open-shell Hartree-Fock (ROHF) equations in
a basis of symmetry-adapted orbitals.  Two-electron integrals are read once
from a stream of canonical quartets and folded into the Coulomb-type (PK) and
exchange-type (K) supermatrices which are contracted with the closed- and
open-shell densities in every SCF cycle.

    >>> from pkscf import gto, scf
    >>> mol = gto.M(atom='H 0 0 0; H 0 0 1.4', charge=1, spin=1)
    >>> mf = scf.ROHF(mol)
    >>> mf.kernel()

'''

__version__ = '0.1.0'

from pkscf import lib
from pkscf import symm
from pkscf import gto
from pkscf import ao2mo
from pkscf import scf

M = gto.M
