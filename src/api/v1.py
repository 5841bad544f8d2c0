"""Centralized v1 API router — all module routers are included here."""

from fastapi import APIRouter

from src.modules.auth.router import router as auth_router
from src.modules.client.router import router as client_router
from src.modules.courier.router import router as courier_router
from src.modules.delivery.router import router as delivery_router
from src.modules.pricing.router import router as pricing_router
from src.modules.settlement.router import reports_router
from src.modules.settlement.router import router as settlement_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
v1_router.include_router(client_router)
v1_router.include_router(courier_router)
v1_router.include_router(delivery_router)
v1_router.include_router(pricing_router)
v1_router.include_router(settlement_router)
v1_router.include_router(reports_router)
