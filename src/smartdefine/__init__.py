"""smartdefine: spaced-repetition review scheduling for looked-up vocabulary."""

from smartdefine.consts import VERSION

__version__ = VERSION
