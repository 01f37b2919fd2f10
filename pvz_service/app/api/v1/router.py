"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from pvz_service.app.api.v1.endpoints import auth, pvz, receptions, products

router = APIRouter()

# Public authentication endpoints
router.include_router(auth.router)

# Pickup points (incl. per-point close/delete tail operations)
router.include_router(pvz.router)

# Receptions and products
router.include_router(receptions.router)
router.include_router(products.router)
