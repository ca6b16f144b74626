"""medsync - credential recovery and e-mail verification service."""

__version__ = "0.1.0"
