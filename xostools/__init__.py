"""Tools for an educational operating system: an XFS disk manager and XSM machine parts."""

__version__ = "0.1.0"