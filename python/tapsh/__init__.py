"""
tapsh package.

An interactive shell for building SystemTap scripts line by line, changing
session options and running the translator without restarting.  Use
``python -m tapsh`` or the ``tapsh`` console script to launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
