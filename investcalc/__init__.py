"""Compound-interest projection and inversion engine with a small JSON API."""

__version__ = "0.1.0"
