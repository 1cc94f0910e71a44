"""
V1 API router aggregator.
"""

from fastapi import APIRouter

from pharmahr.api.v1.endpoints import gateway, system

api_router = APIRouter()

# POST /exec, the single persistence gateway
api_router.include_router(gateway.router)

# Health & dashboard status
api_router.include_router(system.router)
