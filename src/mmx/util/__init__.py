"""
mmx utilities package.

This package provides helpers that sit next to the addressing core in
:mod:`mmx.core`.

Key modules:
- :mod:`mmx.util.messagecodec`: JSON encoding/decoding of identifiers and info records
"""
