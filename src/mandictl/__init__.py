"""mandictl: assistant toolkit for vendors trading in Indian wholesale markets."""

__version__ = "0.1.0"
