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
PKSCF environment variables are defined in this module.


Scratch directory
-----------------

The scratch directory is specified by :data:`TMPDIR`.  Its default value
is the same to the system-wide environment variable ``TMPDIR``.  It can be
overwritten by the environment variable ``PKSCF_TMPDIR``.


Maximum memory
--------------

The variable :data:`MAX_MEMORY` defines the maximum memory (in MB) that the
in-core PK supermatrices may occupy.  The default value is 4000 MB.  It can
be overwritten by the environment variable ``PKSCF_MAX_MEMORY`` or in the
``.pkscf_conf.py`` configuration file.
'''

from pkscf import __config__

MAX_MEMORY = getattr(__config__, 'MAX_MEMORY', 4000)  # MB
TMPDIR = getattr(__config__, 'TMPDIR', '.')

H5F_WRITE_KWARGS = getattr(__config__, 'H5F_WRITE_KWARGS', {})

VERBOSE_DEBUG  = 5
VERBOSE_INFO   = 4
VERBOSE_NOTICE = 3
VERBOSE_WARN   = 2
VERBOSE_ERR    = 1
VERBOSE_QUIET  = 0

BOHR = 0.52917721092  # Angstroms

ELEMENTS = ['X', 'H', 'He']
ELEMENTS_PROTON = {'X': 0, 'H': 1, 'He': 2}
