"""Validation core and its Quart boundary.

`localization` is imported first, constraint contracts depend on it.
"""

from .localization import *  # noqa: F401,F403
from .constraints import *  # noqa: F401,F403
from .outcome import *  # noqa: F401,F403
from .registry import *  # noqa: F401,F403
from .validator import *  # noqa: F401,F403
from .responder import *  # noqa: F401,F403
from .api import *  # noqa: F401,F403
from .middlewares import *  # noqa: F401,F403
