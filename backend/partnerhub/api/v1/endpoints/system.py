# partnerhub/api/v1/endpoints/system.py
# Liveness and readiness probes

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Annotated, Any, Dict
import os
from partnerhub.core.config import settings
from partnerhub.core.logging_setup import logger
from partnerhub.db.mongo_client import get_database, AsyncIOMotorDatabase

router = APIRouter()

APP_VERSION = os.getenv("APP_VERSION", "N/A")

class ServiceStatus(BaseModel):
    service: str
    version: str
    database: str # "connected" | "unreachable"
    # Settlement and wallet writes need a replica set or mongos
    transactions_supported: bool
    status: str # "operational" | "degraded"

def _supports_transactions(hello: Dict[str, Any]) -> bool:
    return bool(hello.get("setName")) or hello.get("msg") == "isdbgrid"

@router.get("/health", summary="Liveness Probe")
async def health_check():
    return {"status": "ok"}

@router.get("/status", response_model=ServiceStatus, summary="Readiness Probe")
async def get_service_status(db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]):
    """Pings MongoDB and checks that the deployment can run multi-document transactions."""
    try:
        hello = await db.command("hello")
    except Exception as e:
        logger.error(f"Status check: MongoDB unreachable: {e}")
        return ServiceStatus(
            service=settings.APP_NAME, version=APP_VERSION,
            database="unreachable", transactions_supported=False, status="degraded",
        )

    transactional = _supports_transactions(hello)
    if not transactional:
        logger.warning("Status check: MongoDB is standalone; settlements will fail.")
    return ServiceStatus(
        service=settings.APP_NAME,
        version=APP_VERSION,
        database="connected",
        transactions_supported=transactional,
        status="operational" if transactional else "degraded",
    )
