"""Parsers for the text formats found under the Linux /proc filesystem."""

__version__ = "0.1.0"