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

import numpy
import h5py
from pkscf.lib.chkfile import load_chkfile_key, load  # noqa: F401
from pkscf.lib.chkfile import dump_chkfile_key, dump, save  # noqa: F401
from pkscf.lib.chkfile import load_mol, save_mol  # noqa: F401
from pkscf.lib.misc import H5FileWrap
from pkscf.symm.blockmat import SymmetryBlockedMatrix, BlockedVector


def load_scf(chkfile):
    return load_mol(chkfile), load(chkfile, 'scf')

def dump_scf(mol, chkfile, e_tot, mo_energy, mo_coeff, doccpi, soccpi,
             fock_eff=None, frzcpi=None, frzvpi=None, irrep_name=None,
             overwrite_mol=True):
    '''Save the converged ROHF results.

    mo_energy (BlockedVector), mo_coeff and fock_eff (SymmetryBlockedMatrix)
    are stored as the block vector and the dense block-diagonal matrices.
    '''
    orbspi = numpy.asarray(mo_energy.dims)
    doccpi = numpy.asarray(doccpi, dtype=int)
    soccpi = numpy.asarray(soccpi, dtype=int)
    mo_occ = []
    for h, n in enumerate(orbspi):
        occ = numpy.zeros(n)
        occ[:doccpi[h]] = 2
        occ[doccpi[h]:doccpi[h]+soccpi[h]] = 1
        mo_occ.append(occ)
    mo_occ = numpy.hstack(mo_occ) if mo_occ else numpy.zeros(0)
    nopen_irreps = numpy.count_nonzero(soccpi)

    scf_dic = {'e_tot'    : e_tot,
               'reference': 'ROHF',
               'nso'      : int(orbspi.sum()),
               'nmo'      : int(orbspi.sum()),
               'mo_energy': mo_energy.to_block_vector(),
               'orbsym'   : mo_energy.orbsym(),
               'mo_occ'   : mo_occ,
               'mo_coeff' : mo_coeff.to_block_matrix(),
               'orbspi'   : orbspi,
               'doccpi'   : doccpi,
               'soccpi'   : soccpi,
               'iopen'    : nopen_irreps * (nopen_irreps + 1)}
    if fock_eff is not None:
        scf_dic['fock_eff'] = fock_eff.to_block_matrix()
    if frzcpi is not None:
        scf_dic['frzcpi'] = numpy.asarray(frzcpi, dtype=int)
    if frzvpi is not None:
        scf_dic['frzvpi'] = numpy.asarray(frzvpi, dtype=int)
    if irrep_name is not None:
        scf_dic['irrep_name'] = numpy.bytes_([str(x).encode() for x in irrep_name])

    if h5py.is_hdf5(chkfile):
        with H5FileWrap(chkfile, 'a') as fh5:
            if 'mol' not in fh5:
                fh5['mol'] = mol.dumps()
            elif overwrite_mol:
                del (fh5['mol'])
                fh5['mol'] = mol.dumps()
    else:
        with H5FileWrap(chkfile, 'w') as fh5:
            fh5['mol'] = mol.dumps()
    dump(chkfile, 'scf', scf_dic)

def load_mo_coeff(chkfile, dims):
    '''MO coefficients and occupations saved by :func:`dump_scf`, in the
    block structure dims.

    Returns:
        (mo_coeff, doccpi, soccpi) or None if the chkfile holds no
        compatible orbitals
    '''
    if not h5py.is_hdf5(chkfile):
        return None
    scf_rec = load(chkfile, 'scf')
    if scf_rec is None or 'mo_coeff' not in scf_rec:
        return None
    dims = numpy.asarray(getattr(dims, 'dims', dims))
    if not numpy.array_equal(numpy.asarray(scf_rec['orbspi']), dims):
        return None
    mo_coeff = SymmetryBlockedMatrix.from_dense(scf_rec['mo_coeff'], dims, 'C')
    return mo_coeff, scf_rec['doccpi'], scf_rec['soccpi']

def load_mo_energy(chkfile):
    '''Orbital energies as a BlockedVector'''
    scf_rec = load(chkfile, 'scf')
    orbspi = scf_rec['orbspi']
    offsets = numpy.append(0, numpy.cumsum(orbspi))
    e = scf_rec['mo_energy']
    return BlockedVector.from_blocks([e[p0:p1] for p0, p1 in
                                      zip(offsets[:-1], offsets[1:])])
