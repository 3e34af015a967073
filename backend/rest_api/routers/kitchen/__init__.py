"""
Kitchen routers - /api/kitchen/*
"""

from .pending import router

__all__ = ["router"]
