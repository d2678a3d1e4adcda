import os
import tempfile

#
# All parameters initialized before loading pkscf_conf.py will be overwritten
# by the dynamic importing procedure.
#

MAX_MEMORY = int(os.environ.get('PKSCF_MAX_MEMORY', 4000)) # MB
TMPDIR = os.environ.get('PKSCF_TMPDIR', tempfile.gettempdir())

VERBOSE = 3  # default logger level (logger.NOTE)

#
# Loading pkscf_conf.py and overwriting above parameters
#
for conf_file in (os.environ.get('PKSCF_CONFIG_FILE', None),
                  os.path.join(os.path.abspath('.'), '.pkscf_conf.py'),
                  os.path.join(os.environ.get('HOME', '.'), '.pkscf_conf.py')):
    if conf_file is not None and os.path.isfile(conf_file):
        break
else:
    conf_file = None

if conf_file is not None:
    with open(conf_file, 'r') as f:
        exec(f.read())
    del f
del (os, tempfile)

#
# All parameters initialized after loading pkscf_conf.py will be kept in the
# program.
#
