# tests/utils/__init__.py

from .builders import make_package, make_resolved, make_strings, make_target
from .constants import DEFAULT_TEST_LOG_LEVEL, GO_PREFIX
from .patch_everywhere import patch_everywhere


__all__ = [  # noqa: RUF022
    # builders
    "make_package",
    "make_resolved",
    "make_strings",
    "make_target",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    "GO_PREFIX",
    # patch_everywhere
    "patch_everywhere",
]
