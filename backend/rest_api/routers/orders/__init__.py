"""
Order routers - /api/orders/*
Order creation, status changes and line item progress.
"""

from .routes import router

__all__ = ["router"]
