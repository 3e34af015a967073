"""
Inventory routers - /api/inventory/*
"""

from .routes import router

__all__ = ["router"]
