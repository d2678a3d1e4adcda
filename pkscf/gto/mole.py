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
Minimal molecule object

It carries the geometry, the charge, the spin and an s-type basis, and
produces the AO integrals through :func:`Mole.intor`.  Point group
detection is not done here.  A symmetry-adapted basis can be supplied by
the caller through :attr:`Mole.symm_orb` and :attr:`Mole.irrep_name`.
'''

import sys
import json
import numpy
from pkscf import lib
from pkscf.lib import logger
from pkscf.lib import parameters as param
from pkscf.gto import moleintor
from pkscf.symm.basis import SymmInfo
from pkscf import __config__

# STO-3G, R. F. Stewart, J. Chem. Phys. 52, 431 (1970)
STO3G = {
    'H' : [[0, (3.42525091, 0.15432897),
               (0.62391373, 0.53532814),
               (0.16885540, 0.44463454)]],
    'He': [[0, (6.36242139, 0.15432897),
               (1.15892300, 0.53532814),
               (0.31364979, 0.44463454)]],
}


def M(**kwargs):
    r'''This is a simple way to build up Mole object quickly.

    Args: Same to :func:`Mole.build`

    Examples:

    >>> from pkscf import gto
    >>> mol = gto.M(atom='H 0 0 0; H 0 0 1.4', unit='Bohr')
    '''
    mol = Mole()
    mol.build(**kwargs)
    return mol

def _std_symbol(symb):
    rawsymb = ''.join([c for c in symb if c.isalpha()])
    return rawsymb[0].upper() + rawsymb[1:].lower()

def format_atom(atoms, unit='Bohr'):
    '''Convert the input :attr:`Mole.atom` to the internal format
    [[symbol, [x, y, z]], ...] in Bohr.  A string input takes ";" and "\\n"
    to separate atoms.

    Examples:

    >>> gto.mole.format_atom('h 0 0 0; He 0 0 1.5')
    [['H', [0.0, 0.0, 0.0]], ['He', [0.0, 0.0, 1.5]]]
    '''
    if isinstance(unit, str):
        if unit.upper().startswith(('B', 'AU')):
            convert = 1.
        elif unit.upper().startswith('A'):
            convert = 1. / param.BOHR
        else:
            raise ValueError('Unknown unit %s' % unit)
    else:
        convert = 1. / unit

    def str2atm(line):
        dat = line.replace(',', ' ').split()
        if dat[0].isdigit():
            symb = param.ELEMENTS[int(dat[0])]
        else:
            symb = _std_symbol(dat[0])
        return [symb, [float(x) * convert for x in dat[1:4]]]

    fmt_atoms = []
    if isinstance(atoms, str):
        atoms = atoms.replace(';', '\n').replace('\t', ' ')
        for line in atoms.split('\n'):
            line1 = line.strip()
            if line1 and not line1.startswith('#'):
                fmt_atoms.append(str2atm(line1))
    else:
        for atom in atoms:
            if isinstance(atom, str):
                fmt_atoms.append(str2atm(atom))
            else:
                if isinstance(atom[0], int):
                    symb = param.ELEMENTS[atom[0]]
                else:
                    symb = _std_symbol(atom[0])
                if isinstance(atom[1], (int, float)):
                    c = atom[1:4]
                else:
                    c = atom[1]
                fmt_atoms.append([symb, [float(x) * convert for x in c]])
    return fmt_atoms

def format_basis(basis, atoms):
    '''Shells of every atom in the format [[atom_id, exps, coeffs], ...].
    The coefficients are multiplied by the primitive normalization factors.

    basis can be the name "sto-3g" or a dict {symbol: [[0, (exp, c), ...]]}.
    '''
    if isinstance(basis, str):
        if basis.lower().replace('-', '') != 'sto3g':
            raise NotImplementedError('Basis %s' % basis)
        basis = STO3G

    bas = []
    for ia, (symb, coord) in enumerate(atoms):
        if symb not in basis:
            raise KeyError('Basis not found for atom %s' % symb)
        for shell in basis[symb]:
            if shell[0] != 0:
                raise NotImplementedError('Only s functions are supported')
            prim = numpy.asarray(shell[1:], dtype=numpy.double)
            es, cs = prim[:,0], prim[:,1]
            bas.append([ia, es, cs * moleintor.gto_norm(es)])
    return bas

def energy_nuc(mol):
    '''Nuclear repulsion energy, (AU)

    Returns
        float
    '''
    if mol.natm == 0:
        return 0
    charges = mol.atom_charges()
    coords = mol.atom_coords()
    rr = numpy.linalg.norm(coords[:,None,:] - coords[None,:,:], axis=2)
    rr[numpy.diag_indices_from(rr)] = 1e200
    qq = charges[:,None] * charges[None,:]
    qq[numpy.diag_indices_from(qq)] = 0
    return (qq/rr).sum() * .5

def dumps(mol):
    '''Serialize Mole object to a JSON formatted str.
    '''
    exclude_keys = {'output', 'stdout', '_keys', '_bas', '_atom'}
    moldic = {}
    for k, v in mol.__dict__.items():
        if k in exclude_keys:
            continue
        if isinstance(v, (numpy.ndarray, numpy.generic)):
            v = v.tolist()
        moldic[k] = v
    moldic['atom'] = repr(mol.atom)
    moldic['basis'] = repr(mol.basis)
    if mol.symm_orb is not None:
        moldic['symm_orb'] = [numpy.asarray(c).tolist() for c in mol.symm_orb]
    if mol.irrep_name is not None:
        moldic['irrep_name'] = list(mol.irrep_name)
    return json.dumps(moldic)

def loads(molstr):
    '''Deserialize a str containing a JSON document to a Mole object.
    '''
    if isinstance(molstr, bytes):
        molstr = molstr.decode()
    moldic = json.loads(molstr)
    mol = Mole()
    mol.__dict__.update(moldic)
    mol.atom = eval(mol.atom)
    mol.basis = eval(mol.basis)
    if mol.symm_orb is not None:
        mol.symm_orb = [numpy.array(c, dtype=numpy.double) for c in mol.symm_orb]
    mol._built = False
    if mol.atom:
        mol.build(dump_input=False)
    return mol


class Mole(lib.StreamObject):
    '''Basic class to hold molecular structure and global options

    Attributes:
        verbose : int
            Print level
        output : str or None
            Output file, default is None which dumps msg to sys.stdout
        max_memory : int, float
            Allowed memory in MB
        charge : int
            Charge of molecule. It affects the electron numbers
        spin : int
            2S, num. alpha electrons - num. beta electrons
        symmetry : bool
            Whether the SCF runs in the symmetry-adapted basis given by
            :attr:`symm_orb`.  The point group analysis is not provided.
        atom : list or str
            To define molecular structure.  The internal format is

            | atom = [[atom1, (x, y, z)],
            |         [atom2, (x, y, z)],
            |         ...
            |         [atomN, (x, y, z)]]

        unit : str
            Bohr (default) or Angstrom
        basis : dict or str
            "sto-3g" or {symbol: [[0, (exp, coeff), ...], ...]}
        symm_orb : list of 2D arrays
            AO->SO coefficients, one (nao, n_h) block per irrep.  The default
            (None) is the unit matrix in one irrep "A".
        irrep_name : list of str
            Labels of the irreps in :attr:`symm_orb`

        ** Following attributes are generated by :func:`Mole.build` **

        nelectron : int
            sum of nuclear charges - :attr:`Mole.charge`
        natm : int
        nbas : int
            number of contracted functions (= nao, s functions only)

    Examples:

    >>> mol = Mole(atom='H 0 0 0; H 0 0 1.4')
    >>> mol.build()
    >>> mol.intor('int1e_ovlp')
    array([[1.        , 0.65931821],
           [0.65931821, 1.        ]])
    '''
    def __init__(self, **kwargs):
        self.verbose = getattr(__config__, 'VERBOSE', logger.NOTE)
        self.output = None
        self.max_memory = param.MAX_MEMORY

        self.charge = 0
        self.spin = 0 # 2j == nelec_alpha - nelec_beta
        self.symmetry = False
        self.atom = []
        self.unit = 'Bohr'
        self.basis = 'sto-3g'
        self.symm_orb = None
        self.irrep_name = None
##################################################
# don't modify the following private variables, they are not input options
        self.stdout = sys.stdout
        self.natm = 0
        self.nbas = 0
        self.nelectron = 0
        self._atom = []
        self._bas = []
        self._built = False
        self._c1_symm_orb = False
        self._keys = set(self.__dict__.keys())
        self.__dict__.update(kwargs)

    def build(self, dump_input=True, verbose=None, output=None, max_memory=None,
              atom=None, basis=None, unit=None, charge=None, spin=None,
              symmetry=None, symm_orb=None, irrep_name=None):
        '''Setup the molecule.  Whenever the attributes of :class:`Mole` are
        changed, this function needs to be called to refresh the internal
        data.
        '''
        if verbose is not None: self.verbose = verbose
        if output is not None: self.output = output
        if max_memory is not None: self.max_memory = max_memory
        if atom is not None: self.atom = atom
        if basis is not None: self.basis = basis
        if unit is not None: self.unit = unit
        if charge is not None: self.charge = charge
        if spin is not None: self.spin = spin
        if symmetry is not None: self.symmetry = symmetry
        if symm_orb is not None:
            self.symm_orb = symm_orb
            self._c1_symm_orb = False
        if irrep_name is not None: self.irrep_name = irrep_name

        if self.output is not None:
            self.stdout = open(self.output, 'w', encoding='utf-8')

        self._atom = format_atom(self.atom, self.unit)
        self.natm = len(self._atom)
        self._bas = format_basis(self.basis, self._atom)
        self.nbas = len(self._bas)
        self.nelectron = self.tot_electrons()
        if (self.nelectron + self.spin) % 2 != 0:
            raise RuntimeError('Electron number %d and spin %d are not consistent\n'
                               'Note mol.spin = 2S = Nalpha - Nbeta, not 2S+1' %
                               (self.nelectron, self.spin))

        if self.symm_orb is None or self._c1_symm_orb:
            # no symmetry adapted basis given, all AOs in one irrep
            self.symm_orb = [numpy.eye(self.nbas)]
            self.irrep_name = ['A']
            self._c1_symm_orb = True
        else:
            self.symm_orb = [numpy.asarray(c, dtype=numpy.double).reshape(self.nbas,-1)
                             for c in self.symm_orb]
            if self.irrep_name is None:
                self.irrep_name = ['IR%d' % h for h in range(len(self.symm_orb))]
            if len(self.irrep_name) != len(self.symm_orb):
                raise ValueError('%d irrep labels for %d symmetry blocks' %
                                 (len(self.irrep_name), len(self.symm_orb)))
            nso = sum(c.shape[1] for c in self.symm_orb)
            if nso != self.nbas:
                raise ValueError('symm_orb spans %d orbitals, basis has %d' %
                                 (nso, self.nbas))

        if dump_input and self.verbose > logger.QUIET:
            self.dump_input()
        self._built = True
        return self
    kernel = build

    def dump_input(self):
        log = logger.new_logger(self)
        log.info('[INPUT] num. atoms = %d', self.natm)
        log.info('[INPUT] num. electrons = %d', self.nelectron)
        log.info('[INPUT] charge = %d', self.charge)
        log.info('[INPUT] spin (= nelec alpha-beta = 2S) = %d', self.spin)
        for ia, (symb, coord) in enumerate(self._atom):
            log.info('[INPUT] %d %-4s %15.9f %15.9f %15.9f AU',
                     ia+1, symb, *coord)
        log.info('[INPUT] basis = %s, nao = %d', self.basis, self.nbas)
        log.info('[INPUT] irreps %s', ' '.join('%s:%d' % (name, c.shape[1]) for
                                              name, c in zip(self.irrep_name, self.symm_orb)))
        log.info('nuclear repulsion = %.15g', self.energy_nuc())

    def tot_electrons(self):
        return int(self.atom_charges().sum()) - self.charge

    @property
    def nelec(self):
        '''(nalpha, nbeta)'''
        nalpha = (self.nelectron + self.spin) // 2
        nbeta = self.nelectron - nalpha
        return nalpha, nbeta

    @property
    def nao(self):
        return self.nbas
    def nao_nr(self):
        return self.nbas

    def atom_symbol(self, atm_id):
        return self._atom[atm_id][0]

    def atom_charge(self, atm_id):
        return param.ELEMENTS_PROTON[self._atom[atm_id][0]]

    def atom_charges(self):
        return numpy.array([self.atom_charge(i) for i in range(len(self._atom))],
                           dtype=numpy.double)

    def atom_coord(self, atm_id):
        return numpy.asarray(self._atom[atm_id][1])

    def atom_coords(self):
        return numpy.array([a[1] for a in self._atom], dtype=numpy.double).reshape(-1,3)

    def symm_info(self):
        '''Block structure of the symmetry-adapted basis'''
        return SymmInfo(self.irrep_name, [c.shape[1] for c in self.symm_orb])

    def intor(self, intor):
        '''Integral generator, see :func:`moleintor.getints`

        Examples:

        >>> mol.intor('int1e_kin')
        '''
        return moleintor.getints(intor, self._bas, self.atom_coords(),
                                 self.atom_charges())

    def intor_symmetric(self, intor):
        return self.intor(intor)

    def energy_nuc(self):
        return energy_nuc(self)
    get_enuc = energy_nuc

    def dumps(self):
        return dumps(self)

    @classmethod
    def loads(cls, molstr):
        return loads(molstr)
