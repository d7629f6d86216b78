"""Configuration constants.

Re-exports all constants for convenient importing:
    from gravity.constants import DEFAULT_MAX_RESULTS, INVISIBLE_CHARS
"""

from gravity.constants.notes import *  # noqa: F403
from gravity.constants.search import *  # noqa: F403
