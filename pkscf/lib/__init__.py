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
Fundamental functions shared by the SCF modules
'''

from pkscf.lib import parameters
param = parameters
from pkscf.lib import numpy_helper
from pkscf.lib import logger
from pkscf.lib import misc
from pkscf.lib import exceptions
from pkscf.lib.misc import StreamObject, H5TmpFile, H5FileWrap, prange, current_memory
from pkscf.lib.numpy_helper import pack_tril, unpack_tril, tril_index
from pkscf.lib import chkfile
from pkscf.lib import diis
