"""Recruiting pipeline and form-builder API."""

__version__ = "1.0.0"
