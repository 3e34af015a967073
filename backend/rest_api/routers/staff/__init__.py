"""
Staff routers - /api/staff
"""

from .routes import router

__all__ = ["router"]
