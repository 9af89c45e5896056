"""Customers domain - per-detailer customer records keyed by E.164 phone"""

from .router import router

__all__ = ["router"]
