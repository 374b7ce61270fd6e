# partnerhub/api/v1/api.py

from fastapi import APIRouter

from partnerhub.api.v1.endpoints import system, orders_api, wallet_api

api_router = APIRouter()

api_router.include_router(system.router, tags=["System"])
api_router.include_router(orders_api.router, prefix="/orders", tags=["Orders"])
api_router.include_router(wallet_api.router, prefix="/wallet", tags=["Wallet"])
