"""pidtag — tag extraction from P&ID drawings (command line front end)."""

__version__ = "0.1.0"
