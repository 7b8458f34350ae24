# localli/__init__.py
"""Local-services booking API."""

__version__ = "0.1.0"
