"""API routers"""
from . import plans

__all__ = ["plans"]
