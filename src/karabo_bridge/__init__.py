""" Python client for the Karabo bridge. A client requests data from a
    bridge server one reply at a time and decodes each reply into a
    :class:`Dataset` of typed values and arrays.
"""

# Utility components.

from . import config
from . import errors
from . import message
from .errors import *

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .array import ArrayView
from .client import Client
from .dataset import Dataset
from .value import Value
from .printer import dump, dump_multipart, render

from . import simulator

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
