"""Detailers domain - business profiles, onboarding completion and public search"""

from .router import router

__all__ = ["router"]
