#
# Arbitrary-precision rational arithmetic
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from .errors import *
from .formats import *
from .context import *
from .bigreal import *
from .spigots import *
from .approximations import *
from .trigonometry import *

__version__ = '1.0'

__all__ = (errors.__all__ + formats.__all__ + context.__all__ + bigreal.__all__
           + spigots.__all__ + approximations.__all__ + trigonometry.__all__)
