"""Stateless core: session/authorization domain, pagination and ports."""

__version__ = "1.0.0"
