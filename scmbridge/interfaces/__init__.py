"""
Caller-facing entry points.
"""

from .api import Client, register_driver

__all__ = [
    "Client",
    "register_driver",
]
