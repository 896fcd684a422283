"""Utility modules for gpmctl.

This module exports commonly used utility functions.
"""

from gpmctl.utils.fileops import copy_tree, make_dir, remove_path
from gpmctl.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "copy_tree",
    "err_console",
    "make_dir",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "remove_path",
]
