"""Utility functions for Dubium Core.

Import convention: use module-level imports for clarity.

    from utils import isodatetime
    timestamp = isodatetime.now()
"""

from . import isodatetime

__all__ = ["isodatetime"]
