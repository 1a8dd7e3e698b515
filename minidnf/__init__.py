"""minidnf — install orchestration for a package-management CLI."""

__version__ = "0.1.0"
