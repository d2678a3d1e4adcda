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
Restricted open-shell Hartree-Fock in a symmetry-adapted basis

The closed and open shell densities

    Dc = C_docc C_docc^T,   Do = C_socc C_socc^T

(without the factor 2 for the doubly occupied orbitals) define the closed
and open shell Fock matrices

    Fc = H + Gc,   Fo = H/2 + Go

which are combined into one effective Fock matrix in the MO basis, see
:func:`get_roothaan_fock`.  The total energy is

    E = E_nuc + Dc . (H + Fc) + Do . (H/2 + Fo)
'''

from enum import Enum
import numpy
import scipy.linalg
from pkscf import lib
from pkscf import ao2mo
from pkscf.lib import logger
from pkscf.lib.exceptions import OccupationError, PKMemoryError
from pkscf.symm import basis as symm_basis
from pkscf.symm.blockmat import SymmetryBlockedMatrix, BlockedVector
from pkscf.scf import jk
from pkscf.scf import diis
from pkscf.scf import chkfile
from pkscf.scf.jk import JKStrategy
from pkscf import __config__

CONV_TOL = getattr(__config__, 'scf_rohf_ROHF_conv_tol', 1e-8)
CONV_TOL_DENSITY = getattr(__config__, 'scf_rohf_ROHF_conv_tol_density', None)
MAX_CYCLE = getattr(__config__, 'scf_rohf_ROHF_max_cycle', 100)
DIIS_ENABLED = getattr(__config__, 'scf_rohf_ROHF_diis', True)
DIIS_SPACE = getattr(__config__, 'scf_rohf_ROHF_diis_space', 8)
DIIS_START_CYCLE = getattr(__config__, 'scf_rohf_ROHF_diis_start_cycle', 3)
DIIS_INTERVAL = getattr(__config__, 'scf_rohf_ROHF_diis_interval', 6)
JK_STRATEGY = getattr(__config__, 'scf_rohf_ROHF_jk_strategy', 'PK')
INIT_GUESS = getattr(__config__, 'scf_rohf_ROHF_init_guess', 'core')
PRINT_MOS = getattr(__config__, 'scf_rohf_ROHF_print_mos', False)
LINDEP_THRESHOLD = getattr(__config__, 'scf_rohf_lindep_threshold', 1e-8)


class SCFState(Enum):
    UNINITIALIZED = 'uninitialized'
    INITIAL_GUESS = 'initial guess'
    ITERATING = 'iterating'
    CONVERGED = 'converged'
    FAILED = 'failed'


def kernel(mf, conv_tol=CONV_TOL, conv_tol_density=CONV_TOL_DENSITY,
           callback=None, verbose=None):
    '''ROHF SCF iterations.  The matrices allocated by :meth:`ROHF.build`
    are updated in place.

    Returns:
        scf_conv, e_tot, mo_energy, mo_coeff.  e_tot is 0.0 if the iterations
        do not converge.
    '''
    log = logger.new_logger(mf, verbose)
    cput0 = (logger.process_clock(), logger.perf_counter())
    mf.build()
    jkbuilder = mf.build_jk(log)

    mf.state = SCFState.INITIAL_GUESS
    mf.init_guess_orbitals(log)
    h1e = mf.h1e
    e_nuc = mf.energy_nuc()
    mo_coeff = mf.mo_coeff
    mo_energy = mf.mo_energy
    dm_closed, dm_open = mf.dm_closed, mf.dm_open
    dm_closed_old, dm_open_old = mf.dm_closed_old, mf.dm_open_old
    gc, go = mf.g_closed, mf.g_open
    fock_closed, fock_open, fock_eff = mf.fock_closed, mf.fock_open, mf.fock_eff
    eigvec = mf._eigvec
    if callable(callback):
        callback(dict(locals(), stage='guess', cycle=0))

    e_init = energy_tot(dm_closed, dm_open, h1e, h1e, h1e.copy().scale(.5), e_nuc)
    log.info('init E= %.15g  (without two-electron contributions)', e_init)

    mf.state = SCFState.ITERATING
    mf.e_tot = e_tot = 0
    mf.e_history = []
    scf_conv = False
    cycle = 0
    cput1 = log.timer('initialize scf', *cput0)
    while not scf_conv and cycle < max(1, mf.max_cycle):
        cycle += 1
        dm_closed_old.copy(dm_closed)
        dm_open_old.copy(dm_open)
        last_e = e_tot

        jkbuilder.get_g(dm_closed, dm_open, gc, go)
        if callable(callback):
            callback(dict(locals(), stage='g'))

        get_fock(h1e, gc, go, mo_coeff, mf.doccpi, mf.soccpi,
                 fock_closed, fock_open, fock_eff)
        if log.verbose >= logger.DEBUG:
            fock_eff.dump(log, 'Effective Fock matrix (MO basis)',
                          mf.symm_info.irrep_name)
        if callable(callback):
            callback(dict(locals(), stage='fock'))

        if mf.diis:
            mf.diis_record(fock_eff, mo_coeff, tag=cycle)

        e_tot = energy_tot(dm_closed, dm_open, h1e, fock_closed, fock_open, e_nuc)
        mf.e_tot = e_tot
        mf.e_history.append(e_tot)

        diis_iter = False
        if (mf.diis and cycle >= mf.diis_start_cycle and
            cycle % mf.diis_interval == 0):
            diis_iter = mf.diis_extrapolate(fock_eff, mo_coeff)

        # new orbitals in the basis of the current orbitals
        fock_eff.diagonalize(eigvec, mo_energy)
        mo_coeff.gemm(mo_coeff, eigvec)
        if callable(callback):
            callback(dict(locals(), stage='orbitals'))

        make_rdm1(mo_coeff, mf.doccpi, mf.soccpi, dm_closed, dm_open)
        if callable(callback):
            callback(dict(locals(), stage='density'))

        drms = max(dm_closed.rms(dm_closed_old), dm_open.rms(dm_open_old))
        log.info('cycle= %d E= %.15g  delta_E= %-.3g  |dD|= %-.3g %s',
                 cycle, e_tot, e_tot-last_e, drms, 'DIIS' if diis_iter else '')

        scf_conv = abs(e_tot - last_e) < conv_tol
        if conv_tol_density is not None:
            scf_conv = scf_conv and drms < conv_tol_density
        cput1 = log.timer('cycle= %d'%cycle, *cput1)

    mf.cycles = cycle
    if scf_conv:
        mf.state = SCFState.CONVERGED
        log.note('Energy converged in %d cycles.', cycle)
    else:
        mf.state = SCFState.FAILED
        log.note('Failed to converge in %d cycles.', cycle)
        e_tot = 0.
    log.timer('scf_cycle', *cput0)
    return scf_conv, e_tot, mo_energy, mo_coeff


def get_hcore(mol):
    '''Core Hamiltonian in the SO basis'''
    h = mol.intor_symmetric('int1e_kin') + mol.intor_symmetric('int1e_nuc')
    return SymmetryBlockedMatrix.from_blocks(
        symm_basis.symm_adapt(h, mol.symm_orb), 'H')

def get_ovlp(mol):
    '''Overlap matrix in the SO basis'''
    s = mol.intor_symmetric('int1e_ovlp')
    return SymmetryBlockedMatrix.from_blocks(
        symm_basis.symm_adapt(s, mol.symm_orb), 'S')

def orthogonalizer(s, lindep=LINDEP_THRESHOLD):
    '''Symmetric orthogonalization

    Returns:
        S^{-1/2} and S^{1/2}
    '''
    x = s.like('S^-1/2')
    xinv = s.like('S^1/2')
    for h, b in enumerate(s.blocks):
        if b.size == 0:
            continue
        e, v = scipy.linalg.eigh(b)
        if e[0] < lindep:
            raise numpy.linalg.LinAlgError(
                'Linear dependence in the basis of irrep %d, smallest '
                'eigenvalue of S = %g' % (h, e[0]))
        x.blocks[h][:] = (v / numpy.sqrt(e)).dot(v.T)
        xinv.blocks[h][:] = (v * numpy.sqrt(e)).dot(v.T)
    return x, xinv

def make_rdm1(mo_coeff, doccpi, soccpi, dm_closed=None, dm_open=None):
    '''Closed and open shell density matrices

    Returns:
        Dc = C_docc C_docc^T and Do = C_socc C_socc^T
    '''
    if dm_closed is None:
        dm_closed = mo_coeff.like('Dc')
    if dm_open is None:
        dm_open = mo_coeff.like('Do')
    for h, c in enumerate(mo_coeff.blocks):
        nd = doccpi[h]
        no = nd + soccpi[h]
        dm_closed.blocks[h][:] = c[:,:nd].dot(c[:,:nd].T)
        dm_open.blocks[h][:] = c[:,nd:no].dot(c[:,nd:no].T)
    return dm_closed, dm_open

def get_roothaan_fock(fc_mo, fo_mo, doccpi, soccpi, out=None):
    '''Effective Fock matrix in the MO basis

    For each irrep the closed (c), open (o) and virtual (v) blocks are

        |  c         o         v
      --+-----------------------------
      c | Fc       2(Fc-Fo)   Fc
      o | 2(Fc-Fo)  Fo        2Fo
      v | Fc        2Fo       Fc
    '''
    if out is None:
        out = fc_mo.like('Feff')
    out.copy(fc_mo)
    for h, f in enumerate(out.blocks):
        nd = doccpi[h]
        no = nd + soccpi[h]
        if no == nd:
            continue
        fc = fc_mo.blocks[h]
        fo = fo_mo.blocks[h]
        f[nd:no,:nd] = 2 * (fc[nd:no,:nd] - fo[nd:no,:nd])
        f[:nd,nd:no] = f[nd:no,:nd].T
        f[nd:no,no:] = 2 * fo[nd:no,no:]
        f[no:,nd:no] = f[nd:no,no:].T
        f[nd:no,nd:no] = fo[nd:no,nd:no]
    return out

def get_fock(h1e, gc, go, mo_coeff, doccpi, soccpi,
             fock_closed=None, fock_open=None, fock_eff=None):
    '''Closed and open shell Fock matrices in the SO basis and the effective
    Fock matrix in the MO basis of mo_coeff

    Returns:
        fock_closed, fock_open, fock_eff
    '''
    if fock_closed is None:
        fock_closed = h1e.like('Fc')
    if fock_open is None:
        fock_open = h1e.like('Fo')
    fock_closed.copy(h1e).add(gc)
    fock_open.copy(h1e).scale(.5).add(go)

    fc_mo = fock_closed.copy().transform(mo_coeff)
    fo_mo = fock_open.copy().transform(mo_coeff)
    fock_eff = get_roothaan_fock(fc_mo, fo_mo, doccpi, soccpi, fock_eff)
    return fock_closed, fock_open, fock_eff

def energy_tot(dm_closed, dm_open, h1e, fock_closed, fock_open, e_nuc=0):
    '''E = E_nuc + Dc.(H+Fc) + Do.(H/2+Fo)'''
    e = (dm_closed.vector_dot(h1e) + dm_closed.vector_dot(fock_closed)
         + .5 * dm_open.vector_dot(h1e) + dm_open.vector_dot(fock_open))
    return e + e_nuc

def find_occupation(mo_energy, ndocc, nsocc):
    '''Fill the ndocc lowest orbitals (of all irreps) doubly, the next nsocc
    orbitals singly.

    Returns:
        doccpi, soccpi : int arrays, the numbers of doubly and singly
        occupied orbitals of each irrep
    '''
    nmo = int(mo_energy.dims.sum())
    if ndocc < 0 or nsocc < 0:
        raise OccupationError('Negative occupation, ndocc=%d nsocc=%d' % (ndocc, nsocc))
    if ndocc + nsocc > nmo:
        raise OccupationError('%d doubly and %d singly occupied orbitals '
                              'exceed %d orbitals' % (ndocc, nsocc, nmo))
    doccpi = numpy.zeros(mo_energy.nirrep, dtype=int)
    soccpi = numpy.zeros(mo_energy.nirrep, dtype=int)
    pairs = mo_energy.sorted_pairs()
    for e, h in pairs[:ndocc]:
        doccpi[h] += 1
    for e, h in pairs[ndocc:ndocc+nsocc]:
        soccpi[h] += 1
    return doccpi, soccpi

def frozen_per_irrep(mo_energy, nfrozen, highest=False):
    '''Distribute the nfrozen lowest (highest if highest=True) orbitals over
    the irreps'''
    frz = numpy.zeros(mo_energy.nirrep, dtype=int)
    if nfrozen <= 0:
        return frz
    pairs = mo_energy.sorted_pairs()
    if highest:
        pairs = pairs[::-1]
    for e, h in pairs[:nfrozen]:
        frz[h] += 1
    return frz

def orbital_energy_table(mo_energy, doccpi, soccpi, irrep_name):
    '''Orbital energies sorted in ascending order and grouped as doubly
    occupied, singly occupied and unoccupied orbitals.

    Returns:
        Three lists of (energy, irrep label)
    '''
    pairs = [(e, irrep_name[h]) for e, h in mo_energy.sorted_pairs()]
    ndocc = int(numpy.sum(doccpi))
    nsocc = int(numpy.sum(soccpi))
    return (pairs[:ndocc], pairs[ndocc:ndocc+nsocc], pairs[ndocc+nsocc:])

def dump_orbital_energies(log, mo_energy, doccpi, soccpi, irrep_name):
    docc, socc, virt = orbital_energy_table(mo_energy, doccpi, soccpi, irrep_name)
    log.note('\nOrbital energies (a.u.):')
    for title, tab in (('Doubly occupied orbitals', docc),
                       ('Singly occupied orbitals', socc),
                       ('Unoccupied orbitals', virt)):
        log.note('    %s', title)
        for p0, p1 in lib.prange(0, len(tab), 4):
            log.note('      %s', '  '.join('%12.6f %3s' % x for x in tab[p0:p1]))
    log.note('\nFinal DOCC vector = (%s)', ', '.join(
        '%d %s' % x for x in zip(doccpi, irrep_name)))
    log.note('Final SOCC vector = (%s)', ', '.join(
        '%d %s' % x for x in zip(soccpi, irrep_name)))

def dump_mos(log, mo_coeff, mo_energy, irrep_name):
    log.note('\nMolecular orbitals:')
    for h, c in enumerate(mo_coeff.blocks):
        if c.size == 0:
            continue
        log.note(' irrep %s', irrep_name[h])
        log.note('   E %s', ' '.join('%12.6f' % e for e in mo_energy.blocks[h]))
        for i, row in enumerate(c):
            log.note('%4d %s', i+1, ' '.join('%12.6f' % x for x in row))


class ROHF(lib.StreamObject):
    '''Restricted open-shell Hartree-Fock

    Attributes:
        verbose : int
            Print level.  Default value equals to :class:`Mole.verbose`
        max_memory : float or int
            Allowed memory in MB for the in-core PK supermatrices.
            Default value equals to :class:`Mole.max_memory`
        chkfile : str
            checkpoint file to save the converged orbitals.  None to skip.
        conv_tol : float
            converge threshold of the energy change.  Default is 1e-8
        conv_tol_density : float or None
            If given, the RMS change of the densities must also fall below it.
        max_cycle : int
            max number of iterations.  Default is 100
        init_guess : str
            'core' diagonalizes the core Hamiltonian.  'chkfile' reads the
            orbitals of :attr:`chkfile` and falls back to 'core' if the
            file does not hold compatible orbitals.
        diis : bool
            Whether to use DIIS.  Default is True
        diis_space : int
            DIIS subspace size.  Default is 8
        diis_start_cycle : int
            The first cycle and the minimal number of stored vectors for
            extrapolation.  Default is 3
        diis_interval : int
            Extrapolate every diis_interval cycles.  Default is 6
        jk_strategy : JKStrategy or str
            Algorithm for the two-electron matrices.  Only the in-core PK
            algorithm is implemented.
        erifile : str
            If given, the SO integrals are streamed through this HDF5 file.
        docc, socc : list of int
            Fixed doubly and singly occupied orbitals per irrep.  If not
            given, the occupations are determined from the orbital energies
            of the initial guess and kept for the rest of the run.
        frozen_core, frozen_virt : int
            Numbers of the lowest and highest orbitals which are counted as
            frozen per irrep for later correlated treatments.
        print_mos : bool
            Print the orbital coefficients at convergence.
        callback : function(envs_dict) => None
            callback function takes one dict as the argument which is
            generated by the builtin function :func:`locals`, with the
            additional key 'stage' in ('guess', 'g', 'fock', 'orbitals',
            'density').

    Saved results

        state : SCFState
        converged : bool
        e_tot : float
            Total energy.  0.0 if the SCF did not converge.
        cycles : int
        mo_energy : BlockedVector
        mo_coeff : SymmetryBlockedMatrix
        doccpi, soccpi : int arrays
        frzcpi, frzvpi : int arrays

    Examples:

    >>> mol = gto.M(atom='H 0 0 0; H 0 0 1.4', charge=1, spin=1)
    >>> mf = scf.ROHF(mol)
    >>> mf.kernel()
    '''
    conv_tol = CONV_TOL
    conv_tol_density = CONV_TOL_DENSITY
    max_cycle = MAX_CYCLE
    init_guess = INIT_GUESS
    diis = DIIS_ENABLED
    diis_space = DIIS_SPACE
    diis_start_cycle = DIIS_START_CYCLE
    diis_interval = DIIS_INTERVAL
    diis_file = None
    jk_strategy = JK_STRATEGY
    erifile = None
    docc = None
    socc = None
    frozen_core = 0
    frozen_virt = 0
    print_mos = PRINT_MOS
    callback = None

    _keys = {
        'conv_tol', 'conv_tol_density', 'max_cycle', 'init_guess', 'diis',
        'diis_space', 'diis_start_cycle', 'diis_interval', 'diis_file',
        'jk_strategy', 'erifile', 'docc', 'socc', 'frozen_core',
        'frozen_virt', 'print_mos', 'callback', 'mol', 'chkfile', 'state',
        'converged', 'cycles', 'e_tot', 'e_history', 'mo_energy',
        'mo_coeff', 'doccpi', 'soccpi', 'frzcpi', 'frzvpi', 'symm_info',
        'h1e', 'ovlp', 's_inv_half', 's_half', 'dm_closed', 'dm_open',
        'dm_closed_old', 'dm_open_old', 'fock_closed', 'fock_open',
        'fock_eff', 'g_closed', 'g_open',
    }

    def __init__(self, mol):
        if not mol._built:
            logger.warn(mol, 'mol.build() is not called in input')
            mol.build()
        self.mol = mol
        self.verbose = mol.verbose
        self.max_memory = mol.max_memory
        self.stdout = mol.stdout
        self.chkfile = None
        self.nelec = None

##################################################
# don't modify the following attributes, they are not input options
        self.state = SCFState.UNINITIALIZED
        self.converged = False
        self.cycles = 0
        self.e_tot = 0
        self.e_history = []
        self.symm_info = None
        self.mo_energy = None
        self.mo_coeff = None
        self.doccpi = None
        self.soccpi = None
        self.frzcpi = None
        self.frzvpi = None
        self._diis = None
        self._built = False

    @property
    def nelec(self):
        '''(nalpha, nbeta)'''
        if getattr(self, '_nelec', None) is not None:
            return self._nelec
        else:
            return self.mol.nelec
    @nelec.setter
    def nelec(self, x):
        self._nelec = x

    @property
    def charge(self):
        return self.mol.charge

    @property
    def multiplicity(self):
        nalpha, nbeta = self.nelec
        return nalpha - nbeta + 1

    def get_nocc(self):
        '''Numbers of doubly and singly occupied orbitals'''
        nalpha, nbeta = self.nelec
        if nbeta < 0 or nalpha < nbeta:
            raise OccupationError('Invalid electron numbers (alpha, beta) = (%d, %d)'
                                  % (nalpha, nbeta))
        return nbeta, nalpha - nbeta

    def dump_flags(self, verbose=None):
        log = logger.new_logger(self, verbose)
        log.info('\n')
        log.info('******** %s ********', self.__class__)
        log.info('method = %s', self.__class__.__name__)
        ndocc, nsocc = self.get_nocc()
        log.info('charge = %d  multiplicity = %d', self.charge, self.multiplicity)
        log.info('num. doubly occ = %d  num. singly occ = %d', ndocc, nsocc)
        if self.docc is not None:
            log.info('fixed DOCC = %s  SOCC = %s', self.docc, self.socc)
        log.info('JK strategy = %s', JKStrategy.from_string(self.jk_strategy).name)
        log.info('initial guess = %s', self.init_guess)
        if self.diis:
            log.info('DIIS enabled, space = %d, start cycle = %d, interval = %d',
                     self.diis_space, self.diis_start_cycle, self.diis_interval)
        else:
            log.info('DIIS disabled')
        log.info('SCF conv_tol = %g', self.conv_tol)
        if self.conv_tol_density is not None:
            log.info('SCF conv_tol_density = %g', self.conv_tol_density)
        log.info('max. SCF cycles = %d', self.max_cycle)
        if self.chkfile:
            log.info('chkfile to save SCF result = %s', self.chkfile)
        log.info('max_memory %d MB (current use %d MB)',
                 self.max_memory, lib.current_memory()[0])
        return self

    def build(self, mol=None):
        '''Allocate the matrices of the SCF iterations and compute the one
        electron integrals'''
        if mol is None:
            mol = self.mol
        self.check_sanity()
        self.symm_info = info = mol.symm_info()
        self.h1e = self.get_hcore(mol)
        self.ovlp = self.get_ovlp(mol)
        self.s_inv_half, self.s_half = orthogonalizer(self.ovlp)

        self.mo_coeff = SymmetryBlockedMatrix(info, 'C')
        self.mo_energy = BlockedVector(info, 'epsilon')
        self.dm_closed = SymmetryBlockedMatrix(info, 'Dc')
        self.dm_open = SymmetryBlockedMatrix(info, 'Do')
        self.dm_closed_old = SymmetryBlockedMatrix(info, 'Dc old')
        self.dm_open_old = SymmetryBlockedMatrix(info, 'Do old')
        self.g_closed = SymmetryBlockedMatrix(info, 'Gc')
        self.g_open = SymmetryBlockedMatrix(info, 'Go')
        self.fock_closed = SymmetryBlockedMatrix(info, 'Fc')
        self.fock_open = SymmetryBlockedMatrix(info, 'Fo')
        self.fock_eff = SymmetryBlockedMatrix(info, 'Feff')
        self._eigvec = SymmetryBlockedMatrix(info, 'eigvec')
        self._diis = None
        self.state = SCFState.UNINITIALIZED
        self.converged = False
        self._built = True
        return self

    def get_hcore(self, mol=None):
        if mol is None: mol = self.mol
        return get_hcore(mol)

    def get_ovlp(self, mol=None):
        if mol is None: mol = self.mol
        return get_ovlp(mol)

    def energy_nuc(self):
        return self.mol.energy_nuc()

    def get_integral_reader(self):
        '''Stream of the SO two-electron integrals'''
        return ao2mo.IWLReader(ao2mo.so_integrals(self.mol, erifile=self.erifile))

    def build_jk(self, log=None):
        '''Create the Gc/Go builder of :attr:`jk_strategy`.  If the in-core
        PK supermatrices do not fit in :attr:`max_memory`, the out-of-core
        algorithm is selected.'''
        if log is None:
            log = logger.new_logger(self)
        strategy = JKStrategy.from_string(self.jk_strategy)
        builder = jk.new_builder(strategy, log)
        try:
            builder.build(self)
        except PKMemoryError as err:
            log.note('Insufficient memory for in-core PK implementation. %s', err)
            log.note('Switching to out-of-core algorithm.')
            builder = jk.new_builder(JKStrategy.OUT_OF_CORE, log)
            self._build_or_fail(builder, log)
        except NotImplementedError as err:
            log.error('%s', err)
            self.state = SCFState.FAILED
            raise
        return builder

    def _build_or_fail(self, builder, log):
        try:
            builder.build(self)
        except NotImplementedError as err:
            log.error('%s', err)
            self.state = SCFState.FAILED
            raise

    def init_guess_orbitals(self, log=None):
        '''Initial orbitals, occupations and densities'''
        if log is None:
            log = logger.new_logger(self)
        if self.init_guess == 'chkfile' and self.load_or_compute_initial_c(log):
            log.note('Read in previous MOs from chkfile %s', self.chkfile)
        else:
            self.init_guess_by_core(log)
        make_rdm1(self.mo_coeff, self.doccpi, self.soccpi,
                  self.dm_closed, self.dm_open)
        return self.mo_coeff

    def init_guess_by_core(self, log=None):
        '''Diagonalize the core Hamiltonian in the orthogonalized basis'''
        if log is None:
            log = logger.new_logger(self)
        log.info('Initial guess from hcore.')
        h = self.h1e.copy().transform(self.s_inv_half)
        h.diagonalize(self._eigvec, self.mo_energy)
        self.mo_coeff.gemm(self.s_inv_half, self._eigvec)
        self.set_occupations(self.mo_energy)
        return self.mo_coeff

    def load_or_compute_initial_c(self, log=None):
        '''Load the orbitals from :attr:`chkfile`.

        Returns:
            True if the orbitals were loaded, otherwise False
        '''
        if log is None:
            log = logger.new_logger(self)
        rec = None
        if self.chkfile:
            rec = chkfile.load_mo_coeff(self.chkfile, self.symm_info)
        if rec is None:
            log.note('No compatible orbitals in chkfile %s. Use core guess.',
                     self.chkfile)
            return False
        mo_coeff, doccpi, soccpi = rec
        self.mo_coeff.copy(mo_coeff)
        mo_energy = chkfile.load_mo_energy(self.chkfile)
        for h, e in enumerate(mo_energy.blocks):
            self.mo_energy.blocks[h][:] = e
        if self.docc is not None:
            self.set_occupations(self.mo_energy)
        else:
            self.doccpi = numpy.asarray(doccpi, dtype=int)
            self.soccpi = numpy.asarray(soccpi, dtype=int)
            self._check_occupations()
        return True

    def set_occupations(self, mo_energy):
        '''Determine doccpi and soccpi, or take the fixed docc and socc'''
        if self.docc is not None or self.socc is not None:
            nirrep = mo_energy.nirrep
            docc = self.docc if self.docc is not None else [0] * nirrep
            socc = self.socc if self.socc is not None else [0] * nirrep
            self.doccpi = numpy.asarray(docc, dtype=int)
            self.soccpi = numpy.asarray(socc, dtype=int)
        else:
            ndocc, nsocc = self.get_nocc()
            self.doccpi, self.soccpi = find_occupation(mo_energy, ndocc, nsocc)
        self._check_occupations()
        return self.doccpi, self.soccpi

    def _check_occupations(self):
        dims = self.symm_info.dims
        if self.doccpi.size != dims.size or self.soccpi.size != dims.size:
            raise OccupationError('Occupations %s %s do not match %d irreps'
                                  % (self.doccpi, self.soccpi, dims.size))
        if (numpy.any(self.doccpi < 0) or numpy.any(self.soccpi < 0) or
            numpy.any(self.doccpi + self.soccpi > dims)):
            raise OccupationError('Occupations DOCC %s SOCC %s exceed the '
                                  'orbitals per irrep %s'
                                  % (self.doccpi, self.soccpi, dims))
        ndocc, nsocc = self.get_nocc()
        if self.doccpi.sum() != ndocc or self.soccpi.sum() != nsocc:
            raise OccupationError('DOCC %s SOCC %s are inconsistent with %d '
                                  'doubly and %d singly occupied orbitals'
                                  % (self.doccpi, self.soccpi, ndocc, nsocc))

    def make_rdm1(self, mo_coeff=None, doccpi=None, soccpi=None):
        if mo_coeff is None: mo_coeff = self.mo_coeff
        if doccpi is None: doccpi = self.doccpi
        if soccpi is None: soccpi = self.soccpi
        return make_rdm1(mo_coeff, doccpi, soccpi)

    def diis_record(self, fock_eff, mo_coeff, tag=None):
        '''Store the effective Fock matrix and its error vector.  The DIIS
        history is created on the first call.'''
        if self._diis is None:
            self._diis = diis.ROHFDIIS(self, self.diis_file)
        return self._diis.record(fock_eff, mo_coeff, self.s_half, tag)

    def diis_extrapolate(self, fock_eff, mo_coeff):
        '''Replace fock_eff by the DIIS extrapolation.  Returns False and
        leaves fock_eff unchanged if the extrapolation fails.'''
        if self._diis is None:
            return False
        return self._diis.extrapolate(fock_eff, mo_coeff, self.s_half)

    def kernel(self, verbose=None):
        '''Run the SCF iterations

        Returns:
            Total energy, 0.0 if not converged
        '''
        self.dump_flags(verbose)
        self.converged, self.e_tot, self.mo_energy, self.mo_coeff = \
                kernel(self, self.conv_tol, self.conv_tol_density,
                       callback=self.callback, verbose=verbose)
        self._finalize(verbose)
        return self.e_tot
    scf = kernel

    def _finalize(self, verbose=None):
        log = logger.new_logger(self, verbose)
        if not self.converged:
            log.note('Failed to converge.  SCF energy reported as %.1f', self.e_tot)
            return self

        log.note('converged SCF energy = %.15g', self.e_tot)
        irrep_name = self.symm_info.irrep_name
        dump_orbital_energies(log, self.mo_energy, self.doccpi, self.soccpi,
                              irrep_name)
        if self.print_mos:
            dump_mos(log, self.mo_coeff, self.mo_energy, irrep_name)

        self.frzcpi = frozen_per_irrep(self.mo_energy, self.frozen_core)
        self.frzvpi = frozen_per_irrep(self.mo_energy, self.frozen_virt, True)
        log.info('frozen core per irrep = %s  frozen virtual per irrep = %s',
                 self.frzcpi, self.frzvpi)

        if self.chkfile:
            chkfile.dump_scf(self.mol, self.chkfile, self.e_tot,
                             self.mo_energy, self.mo_coeff,
                             self.doccpi, self.soccpi, self.fock_eff,
                             self.frzcpi, self.frzvpi, irrep_name)
        return self

    def analyze(self, verbose=None):
        '''Print the sorted orbital energies and the occupations

        Returns:
            (doubly occupied, singly occupied, unoccupied) lists of
            (orbital energy, irrep label)
        '''
        log = logger.new_logger(self, verbose)
        irrep_name = self.symm_info.irrep_name
        dump_orbital_energies(log, self.mo_energy, self.doccpi, self.soccpi,
                              irrep_name)
        return orbital_energy_table(self.mo_energy, self.doccpi, self.soccpi,
                                    irrep_name)
