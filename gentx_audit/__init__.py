"""Audit of genesis transaction submissions posted as GitHub pull requests."""

__version__ = "0.1.0"
