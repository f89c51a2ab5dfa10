"""Journal admin backend: users, roles and permission checks."""

__version__ = "0.1.0"
