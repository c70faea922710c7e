"""
stackcc Command-Line Interface
==============================

This package provides the ``stackcc`` command, a Click-based front end to
the expression compiler.
"""

__all__ = ["stackcc"]
