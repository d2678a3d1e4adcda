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
Two-electron integrals in the symmetry-orbital basis
====================================================

Simple usage::

    >>> from pkscf import gto, ao2mo
    >>> mol = gto.M(atom='H 0 0 0; H 0 0 1.4')
    >>> reader = ao2mo.IWLReader(ao2mo.so_integrals(mol))
'''

from pkscf.ao2mo import iwl
from pkscf.ao2mo.iwl import IWLBuffer, IWLReader, from_eri, write_h5, read_h5

def so_eri(mol):
    '''Dense (nso,nso,nso,nso) integrals in the SO basis of mol'''
    from pkscf import symm
    return symm.symm_adapt_eri(mol.intor('int2e'), mol.symm_orb)

def so_integrals(mol, erifile=None, dataname='so_tei', tol=iwl.CUTOFF,
                 buflen=iwl.IWL_BUFLEN):
    '''Buffers of canonical SO integral quartets of mol.

    Kwargs:
        erifile : str
            If given, the buffers are first saved in this HDF5 file and then
            streamed back from the file.
    '''
    buffers = from_eri(so_eri(mol), tol, buflen)
    if erifile is None:
        return buffers
    write_h5(erifile, buffers, dataname)
    return read_h5(erifile, dataname)
