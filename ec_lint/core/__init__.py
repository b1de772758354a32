"""
ec-lint core library.

This package contains the core functionality:
- document: byte buffer to line/document model and back
- rules: the rule table and the check/fix/infer engine
- writer: atomic file output for fixes
"""

__all__: list[str] = []
