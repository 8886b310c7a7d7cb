"""Widgets of the desktop shell."""
