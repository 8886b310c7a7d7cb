"""Retouch Studio: a layered photo retouching editor."""

__version__ = "0.3.0"
