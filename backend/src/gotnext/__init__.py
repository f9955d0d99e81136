"""gotnext: pickup basketball next-up rotation."""

__version__ = "0.1.0"
