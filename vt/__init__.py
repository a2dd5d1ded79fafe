"""Internal modules that back the public :mod:`vt` API."""

from . import constants as _constants
from . import errors as _errors
from . import frontend as _frontend
from .constants import *  # noqa: F401,F403
from .errors import *  # noqa: F401,F403
from .frontend import *  # noqa: F401,F403

__all__ = []
__all__ += getattr(_constants, "__all__", [])
__all__ += getattr(_errors, "__all__", [])
__all__ += getattr(_frontend, "__all__", [])
