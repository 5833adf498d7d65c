"""Structural indentation checker for markup with script blocks and template tags."""

__version__ = "0.1.0"
