# partnerhub/modules/wallet/repository.py
# Ledger collections: payables, receivables, payment history and the wallet summary singleton

from typing import Optional, List, Dict, Any
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClientSession
from partnerhub.core.config import settings
from partnerhub.core.logging_setup import logger
from partnerhub.core.exceptions import translate_db_errors
from partnerhub.db.mongo_client import (
    AsyncIOMotorDatabase, get_database, PAYABLES, RECEIVABLES, PAYMENT_HISTORY, WALLET,
)
from partnerhub.db.schemas.ledger_schemas import (
    PayableDoc, ReceivableDoc, PaymentHistoryDoc, WalletSummaryDoc, PayableStatus, ReceivableStatus,
)
from partnerhub.modules.orders.repository import map_doc
from partnerhub.services.codes import new_document_id

class LedgerRepository:
    """Repository for ledger entries and the platform wallet summary."""

    def __init__(self, db: AsyncIOMotorDatabase = Depends(get_database)):
        self._payables = db[PAYABLES]
        self._receivables = db[RECEIVABLES]
        self._history = db[PAYMENT_HISTORY]
        self._wallet = db[WALLET]
        self._summary_id = settings.WALLET_SUMMARY_DOC_ID

    # --- Inserts ---
    async def _insert(self, collection, data: Dict[str, Any], session: Optional[AsyncIOMotorClientSession]) -> str:
        data.setdefault("_id", new_document_id())
        with translate_db_errors(f"inserting into {collection.name}", session, collection=collection.name):
            await collection.insert_one(data, session=session)
        logger.bind(collection=collection.name).debug(f"Inserted ledger document {data['_id']}.")
        return data["_id"]

    async def insert_payable(self, data: Dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None) -> str:
        return await self._insert(self._payables, data, session)

    async def insert_receivable(self, data: Dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None) -> str:
        return await self._insert(self._receivables, data, session)

    async def insert_payment_history(self, data: Dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None) -> str:
        return await self._insert(self._history, data, session)

    # --- Point reads / updates ---
    async def get_payable(self, payable_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[PayableDoc]:
        with translate_db_errors("fetching payable", session, payable_id=payable_id):
            doc = await self._payables.find_one({"_id": payable_id}, session=session)
        return map_doc(PayableDoc, doc)

    async def get_receivable(self, receivable_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[ReceivableDoc]:
        with translate_db_errors("fetching receivable", session, receivable_id=receivable_id):
            doc = await self._receivables.find_one({"_id": receivable_id}, session=session)
        return map_doc(ReceivableDoc, doc)

    async def update_payable(self, payable_id: str, fields: Dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None) -> bool:
        with translate_db_errors("updating payable", session, payable_id=payable_id):
            result = await self._payables.update_one({"_id": payable_id}, {"$set": fields}, session=session)
        return result.matched_count == 1

    async def update_receivable(self, receivable_id: str, fields: Dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None) -> bool:
        with translate_db_errors("updating receivable", session, receivable_id=receivable_id):
            result = await self._receivables.update_one({"_id": receivable_id}, {"$set": fields}, session=session)
        return result.matched_count == 1

    # --- Listings ---
    async def list_payables(self, status: Optional[PayableStatus] = None) -> List[PayableDoc]:
        query = {"status": status.value} if status else {}
        with translate_db_errors("listing payables"):
            docs = await self._payables.find(query).sort("date", -1).to_list(length=None)
        return [map_doc(PayableDoc, d) for d in docs]

    async def list_receivables(self, status: Optional[ReceivableStatus] = None, partner_id: Optional[str] = None) -> List[ReceivableDoc]:
        query: Dict[str, Any] = {}
        if status: query["status"] = status.value
        if partner_id: query["partner_id"] = partner_id
        with translate_db_errors("listing receivables"):
            docs = await self._receivables.find(query).sort("date", -1).to_list(length=None)
        return [map_doc(ReceivableDoc, d) for d in docs]

    async def list_payment_history(self) -> List[PaymentHistoryDoc]:
        with translate_db_errors("listing payment history"):
            docs = await self._history.find({}).sort("date", -1).to_list(length=None)
        return [map_doc(PaymentHistoryDoc, d) for d in docs]

    # --- Wallet summary ---
    async def get_wallet_summary(self, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[WalletSummaryDoc]:
        with translate_db_errors("fetching wallet summary", session):
            doc = await self._wallet.find_one({"_id": self._summary_id}, session=session)
        return map_doc(WalletSummaryDoc, doc)

    async def ensure_wallet_summary(self) -> WalletSummaryDoc:
        """Creates the summary with zero balances if it does not exist yet."""
        with translate_db_errors("initialising wallet summary"):
            await self._wallet.update_one(
                {"_id": self._summary_id},
                {"$setOnInsert": {"total_balance": 0.0, "revenue": 0.0}},
                upsert=True,
            )
        return await self.get_wallet_summary()

    async def increment_wallet(
        self,
        revenue: float = 0.0,
        total_balance: float = 0.0,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> None:
        """Atomically adds to the summary counters, creating the document if missing."""
        increments = {k: v for k, v in (("revenue", revenue), ("total_balance", total_balance)) if v}
        if not increments:
            return
        # A field may not appear in both $inc and $setOnInsert
        on_insert = {k: 0.0 for k in ("revenue", "total_balance") if k not in increments}
        update: Dict[str, Any] = {"$inc": increments}
        if on_insert:
            update["$setOnInsert"] = on_insert
        with translate_db_errors("updating wallet summary", session, increments=increments):
            await self._wallet.update_one({"_id": self._summary_id}, update, upsert=True, session=session)
