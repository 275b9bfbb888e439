"""Read-only inventory of container runtimes and Linux host resources."""

__version__ = "0.1.0"