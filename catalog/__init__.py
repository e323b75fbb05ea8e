"""Catalog locator package.

Public API::

    from catalog import run_lookup
    result = run_lookup("notepad.exe")
"""

from catalog.runner import LookupResult, run_lookup

__all__ = ["LookupResult", "run_lookup"]
