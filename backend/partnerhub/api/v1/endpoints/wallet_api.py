# partnerhub/api/v1/endpoints/wallet_api.py
# REST endpoints for the platform wallet, payables and receivables

from fastapi import APIRouter, Depends, Query, Path as FastApiPath
from typing import Annotated, List
from partnerhub.modules.wallet.service import WalletService
from partnerhub.db.schemas.common_schemas import ActionResult
from partnerhub.db.schemas.ledger_schemas import (
    WalletOverview, PayableDoc, ReceivableDoc, PaymentHistoryDoc,
    PayableStatusUpdate, ReceivableStatusUpdate, CollectPaymentInput,
)
from partnerhub.core.logging_setup import logger

router = APIRouter()

WalletServiceDep = Annotated[WalletService, Depends()]
ActorId = Annotated[str, Query(description="ID of the back-office user performing the action")]

@router.get("/summary", response_model=WalletOverview, summary="Wallet Summary")
async def get_wallet_summary(wallet_service: WalletServiceDep):
    return await wallet_service.get_wallet_overview()

@router.get("/payables", response_model=List[PayableDoc], summary="List Payables")
async def list_payables(wallet_service: WalletServiceDep):
    return await wallet_service.list_payables()

@router.get("/receivables", response_model=List[ReceivableDoc], summary="List Receivables")
async def list_receivables(wallet_service: WalletServiceDep):
    return await wallet_service.list_receivables()

@router.get("/receivables/pending", response_model=List[ReceivableDoc], summary="Pending Receivables for a Partner")
async def list_pending_receivables(
    wallet_service: WalletServiceDep,
    partner_id: Annotated[str, Query(min_length=1, description="Partner code (or user ID)")],
):
    return await wallet_service.list_pending_receivables_for_partner(partner_id)

@router.get("/payment-history", response_model=List[PaymentHistoryDoc], summary="Payment History")
async def list_payment_history(wallet_service: WalletServiceDep):
    return await wallet_service.list_payment_history()

@router.patch("/payables/{payable_id}/status", response_model=ActionResult, summary="Update Payable Status")
async def update_payable_status(
    payable_id: Annotated[str, FastApiPath(description="The ID of the payable")],
    body: PayableStatusUpdate,
    wallet_service: WalletServiceDep,
    actor_id: ActorId = "system",
):
    logger.bind(payable_id=payable_id, status=body.status.value).info("Request to update payable status.")
    await wallet_service.update_payable_status(payable_id, body.status, actor_id=actor_id)
    return ActionResult(success=True, message=f"Payable marked as {body.status.value}.")

@router.patch("/receivables/{receivable_id}/status", response_model=ActionResult, summary="Update Receivable Status")
async def update_receivable_status(
    receivable_id: Annotated[str, FastApiPath(description="The ID of the receivable")],
    body: ReceivableStatusUpdate,
    wallet_service: WalletServiceDep,
    actor_id: ActorId = "system",
):
    logger.bind(receivable_id=receivable_id, status=body.status.value).info("Request to update receivable status.")
    await wallet_service.update_receivable_status(receivable_id, body.status, actor_id=actor_id)
    return ActionResult(success=True, message=f"Receivable marked as {body.status.value}.")

@router.post("/receivables/{receivable_id}/collect", response_model=ReceivableDoc, summary="Collect Pending Payment")
async def collect_pending_payment(
    receivable_id: Annotated[str, FastApiPath(description="The ID of the receivable")],
    body: CollectPaymentInput,
    wallet_service: WalletServiceDep,
    actor_id: ActorId = "system",
):
    return await wallet_service.collect_pending_payment(receivable_id, body.amount_collected, actor_id=actor_id)
