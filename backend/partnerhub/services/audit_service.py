# partnerhub/services/audit_service.py
# Service responsible for writing audit logs to MongoDB

from typing import Dict, Any, Optional
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime, timezone
from partnerhub.core.config import settings
from partnerhub.core.logging_setup import logger, trace_id_var
from partnerhub.db.mongo_client import get_database

class AuditService:
    """Logs financial actions (settlements, payouts, collections) to a dedicated collection."""
    def __init__(self, db: AsyncIOMotorDatabase = Depends(get_database)):
        self.enabled = settings.AUDIT_LOG_ENABLED
        self._collection = db[settings.AUDIT_LOG_MONGO_COLLECTION]

    async def log_event(
        self,
        actor_id: str, # User or system ID performing the action
        action: str, # e.g. "confirm_enquiry", "pay_payable"
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        success: bool = True,
        details: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ):
        """Writes an audit log entry. Never raises: the audited action has already happened."""
        if not self.enabled: return

        log_entry = {
            "timestamp": datetime.now(timezone.utc),
            "actor_id": actor_id,
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "success": success,
            "details": details or {},
            "trace_id": trace_id or trace_id_var.get() or "N/A",
        }
        log = logger.bind(audit_action=action, audit_actor=actor_id, audit_success=success)
        try:
            await self._collection.insert_one(log_entry)
            log.debug("Audit event logged successfully.")
        except Exception:
            log.exception("Failed to write audit log to MongoDB.")
