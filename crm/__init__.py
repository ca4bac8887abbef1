"""CRM pipeline and analytics core."""

__version__ = "1.0.0"
