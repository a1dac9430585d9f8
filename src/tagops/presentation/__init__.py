"""Presentation layer -- the ``tagops`` CLI."""
