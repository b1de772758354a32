"""
ec-lint: EditorConfig validator, fixer and settings inference.

A library and CLI tool that checks source files against EditorConfig
settings (charset, indentation, line endings, trailing whitespace, final
newline, max line length), rewrites them to conform, or infers settings
from existing files.

Usage:
    from ec_lint.core.rules import check, fix

    data = Path("setup.py").read_bytes()
    result = check({"end_of_line": "lf"}, data)
    fixed = fix({"end_of_line": "lf"}, data)
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
