# partnerhub/modules/wallet/service.py
from typing import List, Optional
from fastapi import Depends
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorClientSession

from partnerhub.db.mongo_client import AsyncIOMotorDatabase, get_database, run_in_transaction
from partnerhub.db.schemas.ledger_schemas import (
    PayableDoc, ReceivableDoc, PaymentHistoryDoc, WalletOverview,
    PayableStatus, ReceivableStatus, PaymentType,
)
from partnerhub.modules.wallet.repository import LedgerRepository
from partnerhub.modules.wallet.exceptions import (
    PayableNotFoundError, ReceivableNotFoundError, WalletSummaryNotFoundError,
    InsufficientWalletBalanceError, ReceivableNotPendingError, CollectionExceedsPendingError,
    LedgerEntrySettledError,
)
from partnerhub.services.audit_service import AuditService
from partnerhub.services.codes import new_payment_transaction_id
from partnerhub.core.logging_setup import logger

def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()

class WalletService:
    """Payouts to partners, collections from sales and the wallet overview."""
    def __init__(
        self,
        ledger_repo: LedgerRepository = Depends(),
        audit_service: AuditService = Depends(),
        db: AsyncIOMotorDatabase = Depends(get_database),
    ):
        self.ledger_repo = ledger_repo
        self.audit_service = audit_service
        self.db_client = db.client

    # --- Reads ---
    async def get_wallet_overview(self) -> WalletOverview:
        summary = await self.ledger_repo.ensure_wallet_summary()
        pending_payables = await self.ledger_repo.list_payables(status=PayableStatus.PENDING)
        pending_receivables = await self.ledger_repo.list_receivables(status=ReceivableStatus.PENDING)
        return WalletOverview(
            total_balance=summary.total_balance,
            revenue=summary.revenue,
            payable=round(sum(p.payable_amount for p in pending_payables), 2),
            receivable=round(sum(r.pending_amount for r in pending_receivables), 2),
        )

    async def list_payables(self) -> List[PayableDoc]:
        return await self.ledger_repo.list_payables()

    async def list_receivables(self) -> List[ReceivableDoc]:
        return await self.ledger_repo.list_receivables()

    async def list_pending_receivables_for_partner(self, partner_id: str) -> List[ReceivableDoc]:
        # Partners are keyed by partner code, or by user id for partners without one
        return await self.ledger_repo.list_receivables(status=ReceivableStatus.PENDING, partner_id=partner_id)

    async def list_payment_history(self) -> List[PaymentHistoryDoc]:
        return await self.ledger_repo.list_payment_history()

    # --- Payables ---
    async def update_payable_status(self, payable_id: str, status: PayableStatus, actor_id: str = "system") -> None:
        log = logger.bind(payable_id=payable_id, new_status=status.value)
        if status is PayableStatus.PENDING:
            payable = await self.ledger_repo.get_payable(payable_id)
            if not payable:
                raise PayableNotFoundError(payable_id)
            if payable.status is PayableStatus.PAID:
                # Already debited from the wallet
                raise LedgerEntrySettledError("payable", payable_id, payable.status.value)
            log.info("Payable already Pending; nothing to do.")
            return

        paid = await run_in_transaction(self.db_client, lambda s: self._pay_payable(payable_id, s))
        if paid is None:
            log.info("Payable already Paid; nothing to do.")
            return
        log.success(f"Payable paid: {paid.payable_amount} to {paid.recipient_name}.")
        await self.audit_service.log_event(
            actor_id=actor_id, action="pay_payable", entity_type="payable", entity_id=payable_id,
            details={"amount": paid.payable_amount, "recipient_id": paid.recipient_id},
        )

    async def _pay_payable(self, payable_id: str, session: AsyncIOMotorClientSession) -> Optional[PayableDoc]:
        payable = await self.ledger_repo.get_payable(payable_id, session=session)
        if not payable:
            raise PayableNotFoundError(payable_id)
        if payable.status is PayableStatus.PAID:
            return None

        summary = await self.ledger_repo.get_wallet_summary(session=session)
        if not summary:
            raise WalletSummaryNotFoundError()
        amount = payable.payable_amount
        if summary.total_balance < amount:
            raise InsufficientWalletBalanceError(summary.total_balance, amount)

        await self.ledger_repo.update_payable(payable_id, {"status": PayableStatus.PAID.value}, session=session)
        await self.ledger_repo.increment_wallet(total_balance=-amount, session=session)
        await self.ledger_repo.insert_payment_history({
            "date": _today(),
            "name": f"Paid to {payable.recipient_name}",
            "transaction_id": new_payment_transaction_id(),
            "amount": amount,
            "payment_method": "Wallet",
            "type": PaymentType.DEBIT.value,
        }, session=session)
        return payable

    # --- Receivables ---
    async def update_receivable_status(self, receivable_id: str, status: ReceivableStatus, actor_id: str = "system") -> None:
        log = logger.bind(receivable_id=receivable_id, new_status=status.value)
        if status is ReceivableStatus.PENDING:
            receivable = await self.ledger_repo.get_receivable(receivable_id)
            if not receivable:
                raise ReceivableNotFoundError(receivable_id)
            if receivable.status is ReceivableStatus.RECEIVED:
                # Already credited; pending_amount is 0
                raise LedgerEntrySettledError("receivable", receivable_id, receivable.status.value)
            log.info("Receivable already Pending; nothing to do.")
            return

        received = await run_in_transaction(self.db_client, lambda s: self._receive(receivable_id, s))
        if received is None:
            log.info("Receivable already Received; nothing to do.")
            return
        log.success(f"Receivable settled: {received.pending_amount} from {received.partner_name}.")
        await self.audit_service.log_event(
            actor_id=actor_id, action="receive_receivable", entity_type="receivable", entity_id=receivable_id,
            details={"amount": received.pending_amount, "partner_id": received.partner_id},
        )

    async def _receive(self, receivable_id: str, session: AsyncIOMotorClientSession) -> Optional[ReceivableDoc]:
        receivable = await self.ledger_repo.get_receivable(receivable_id, session=session)
        if not receivable:
            raise ReceivableNotFoundError(receivable_id)
        if receivable.status is ReceivableStatus.RECEIVED:
            return None

        summary = await self.ledger_repo.get_wallet_summary(session=session)
        if not summary:
            raise WalletSummaryNotFoundError()
        amount = receivable.pending_amount

        await self.ledger_repo.update_receivable(
            receivable_id, {"status": ReceivableStatus.RECEIVED.value, "pending_amount": 0.0}, session=session,
        )
        # Revenue was recognised at settlement; only the balance moves here
        await self.ledger_repo.increment_wallet(total_balance=amount, session=session)
        await self.ledger_repo.insert_payment_history({
            "date": _today(),
            "name": f"Received from {receivable.partner_name}",
            "transaction_id": new_payment_transaction_id(),
            "amount": amount,
            "payment_method": "System",
            "type": PaymentType.CREDIT.value,
        }, session=session)
        return receivable

    async def collect_pending_payment(self, receivable_id: str, amount_collected: float, actor_id: str = "system") -> ReceivableDoc:
        """Records a partial (or full) cash collection against a pending receivable."""
        async def collect(session: AsyncIOMotorClientSession) -> ReceivableDoc:
            receivable = await self.ledger_repo.get_receivable(receivable_id, session=session)
            if not receivable:
                raise ReceivableNotFoundError(receivable_id)
            if receivable.status is not ReceivableStatus.PENDING:
                raise ReceivableNotPendingError(receivable_id)
            if amount_collected > receivable.pending_amount:
                raise CollectionExceedsPendingError(amount_collected, receivable.pending_amount)

            new_pending = round(receivable.pending_amount - amount_collected, 2)
            new_status = ReceivableStatus.RECEIVED if new_pending <= 0 else ReceivableStatus.PENDING
            await self.ledger_repo.update_receivable(
                receivable_id, {"pending_amount": new_pending, "status": new_status.value}, session=session,
            )
            return receivable.model_copy(update={"pending_amount": new_pending, "status": new_status})

        updated = await run_in_transaction(self.db_client, collect)
        logger.bind(receivable_id=receivable_id).info(
            f"Collected {amount_collected}; pending now {updated.pending_amount} ({updated.status.value})."
        )
        await self.audit_service.log_event(
            actor_id=actor_id, action="collect_payment", entity_type="receivable", entity_id=receivable_id,
            details={"amount_collected": amount_collected, "pending_amount": updated.pending_amount},
        )
        return updated
