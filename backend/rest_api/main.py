"""
REST API main application.
Entry point for the FastAPI REST server.

Run with:
    uvicorn rest_api.main:app --reload --port 8000
"""

from fastapi import FastAPI

from shared.config.settings import settings
from rest_api.core.cors import configure_cors
from rest_api.core.lifespan import lifespan
from rest_api.core.middlewares import register_middlewares
from rest_api.routers.inventory import router as inventory_router
from rest_api.routers.kitchen import router as kitchen_router
from rest_api.routers.orders import router as orders_router
from rest_api.routers.products import router as products_router
from rest_api.routers.public import health_router
from rest_api.routers.staff import router as staff_router
from rest_api.routers.tables import router as tables_router


# Create FastAPI application
app = FastAPI(
    title="Resto Bar REST API",
    description="Dining floor orders, kitchen queue and inventory",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.debug,
)

register_middlewares(app)
# CORS is added last so it wraps every other middleware
configure_cors(app)


# =============================================================================
# Routers
# =============================================================================

app.include_router(health_router)
app.include_router(orders_router)
app.include_router(tables_router)
app.include_router(products_router)
app.include_router(inventory_router)
app.include_router(kitchen_router)
app.include_router(staff_router)
