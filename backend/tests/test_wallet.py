"""Wallet operations: paying partners, receiving and collecting sale proceeds."""

import pytest

from partnerhub.db.schemas.ledger_schemas import PayableStatus, ReceivableStatus
from partnerhub.modules.wallet.exceptions import (
    CollectionExceedsPendingError,
    InsufficientWalletBalanceError,
    LedgerEntrySettledError,
    PayableNotFoundError,
    ReceivableNotFoundError,
    ReceivableNotPendingError,
    WalletSummaryNotFoundError,
)
from seeds import count, seed_catalog, seed_enquiry, seed_partner


async def _summary(db, total_balance=0.0, revenue=0.0):
    await db["wallet"].insert_one({"_id": "summary", "total_balance": total_balance, "revenue": revenue})


async def _payable(db, payable_id="pay-1", amount=1000.0, status="Pending"):
    await db["payables"].insert_one({
        "_id": payable_id,
        "date": "2024-05-01",
        "recipient_name": "Asha Rao",
        "recipient_id": "PC1001",
        "payable_amount": amount,
        "status": status,
        "description": "Commission for 'Sea View Villa'",
    })


async def _receivable(db, receivable_id="rec-1", amount=10000.0, status="Pending", partner_id="PC1001", date="2024-05-01"):
    await db["receivables"].insert_one({
        "_id": receivable_id,
        "date": date,
        "partner_name": "Asha Rao",
        "partner_id": partner_id,
        "total_amount": amount,
        "pending_amount": amount if status == "Pending" else 0.0,
        "status": status,
        "description": "Sale of 'Sea View Villa'",
    })


async def _balance(db) -> float:
    return (await db["wallet"].find_one({"_id": "summary"}))["total_balance"]


# --- Payables ---

async def test_paying_a_payable_debits_the_wallet(db, wallet_service):
    await _summary(db, total_balance=5000.0, revenue=20000.0)
    await _payable(db, amount=1000.0)

    await wallet_service.update_payable_status("pay-1", PayableStatus.PAID, actor_id="admin-1")

    assert (await db["payables"].find_one({"_id": "pay-1"}))["status"] == "Paid"
    summary = await db["wallet"].find_one({"_id": "summary"})
    assert summary["total_balance"] == 4000.0
    assert summary["revenue"] == 20000.0

    history = await db["paymentHistory"].find_one({})
    assert history["name"] == "Paid to Asha Rao"
    assert history["amount"] == 1000.0
    assert history["type"] == "Debit"
    assert history["payment_method"] == "Wallet"
    assert history["transaction_id"].startswith("PAY")
    assert len(history["transaction_id"]) == 15

    audit = await db["audit_logs"].find_one({"action": "pay_payable"})
    assert audit["actor_id"] == "admin-1"


async def test_paying_twice_debits_once(db, wallet_service):
    await _summary(db, total_balance=5000.0)
    await _payable(db, amount=1000.0)

    await wallet_service.update_payable_status("pay-1", PayableStatus.PAID)
    await wallet_service.update_payable_status("pay-1", PayableStatus.PAID)

    assert await _balance(db) == 4000.0
    assert await count(db, "paymentHistory") == 1


async def test_insufficient_balance_leaves_payable_pending(db, wallet_service):
    await _summary(db, total_balance=500.0)
    await _payable(db, amount=1000.0)

    with pytest.raises(InsufficientWalletBalanceError) as exc_info:
        await wallet_service.update_payable_status("pay-1", PayableStatus.PAID)

    assert "Insufficient wallet balance" in str(exc_info.value)
    assert (await db["payables"].find_one({"_id": "pay-1"}))["status"] == "Pending"
    assert await _balance(db) == 500.0
    assert await count(db, "paymentHistory") == 0


async def test_paying_without_wallet_summary(db, wallet_service):
    await _payable(db)

    with pytest.raises(WalletSummaryNotFoundError):
        await wallet_service.update_payable_status("pay-1", PayableStatus.PAID)


async def test_unknown_payable(db, wallet_service):
    await _summary(db, total_balance=5000.0)

    with pytest.raises(PayableNotFoundError):
        await wallet_service.update_payable_status("missing", PayableStatus.PAID)
    with pytest.raises(PayableNotFoundError):
        await wallet_service.update_payable_status("missing", PayableStatus.PENDING)


async def test_paid_payable_cannot_be_reset_and_paid_again(db, wallet_service):
    await _summary(db, total_balance=5000.0)
    await _payable(db, amount=1000.0)
    await wallet_service.update_payable_status("pay-1", PayableStatus.PAID)

    with pytest.raises(LedgerEntrySettledError):
        await wallet_service.update_payable_status("pay-1", PayableStatus.PENDING)
    await wallet_service.update_payable_status("pay-1", PayableStatus.PAID)

    assert (await db["payables"].find_one({"_id": "pay-1"}))["status"] == "Paid"
    assert await _balance(db) == 4000.0
    assert await count(db, "paymentHistory") == 1


async def test_pending_payable_reset_is_a_no_op(db, wallet_service):
    await _summary(db, total_balance=5000.0)
    await _payable(db)

    await wallet_service.update_payable_status("pay-1", PayableStatus.PENDING)

    assert (await db["payables"].find_one({"_id": "pay-1"}))["status"] == "Pending"
    assert await _balance(db) == 5000.0


# --- Receivables ---

async def test_receiving_credits_balance_but_not_revenue(db, wallet_service):
    await _summary(db, total_balance=100.0, revenue=10000.0)
    await _receivable(db, amount=10000.0)

    await wallet_service.update_receivable_status("rec-1", ReceivableStatus.RECEIVED)

    receivable = await db["receivables"].find_one({"_id": "rec-1"})
    assert receivable["status"] == "Received"
    assert receivable["pending_amount"] == 0.0
    summary = await db["wallet"].find_one({"_id": "summary"})
    assert summary["total_balance"] == 10100.0
    assert summary["revenue"] == 10000.0

    history = await db["paymentHistory"].find_one({})
    assert history["type"] == "Credit"
    assert history["payment_method"] == "System"
    assert history["name"] == "Received from Asha Rao"


async def test_receiving_twice_credits_once(db, wallet_service):
    await _summary(db)
    await _receivable(db, amount=2500.0)

    await wallet_service.update_receivable_status("rec-1", ReceivableStatus.RECEIVED)
    await wallet_service.update_receivable_status("rec-1", ReceivableStatus.RECEIVED)

    assert await _balance(db) == 2500.0
    assert await count(db, "paymentHistory") == 1


async def test_unknown_receivable(db, wallet_service):
    await _summary(db)
    with pytest.raises(ReceivableNotFoundError):
        await wallet_service.update_receivable_status("missing", ReceivableStatus.RECEIVED)


async def test_received_receivable_cannot_be_reset(db, wallet_service):
    await _summary(db)
    await _receivable(db, amount=300.0)
    await wallet_service.update_receivable_status("rec-1", ReceivableStatus.RECEIVED)

    with pytest.raises(LedgerEntrySettledError) as exc_info:
        await wallet_service.update_receivable_status("rec-1", ReceivableStatus.PENDING)

    assert str(exc_info.value) == "This receivable is already Received and cannot be reset to Pending."
    receivable = await db["receivables"].find_one({"_id": "rec-1"})
    assert receivable["status"] == "Received"
    assert receivable["pending_amount"] == 0.0
    assert await _balance(db) == 300.0
    overview = await wallet_service.get_wallet_overview()
    assert overview.receivable == 0.0
    assert overview.total_balance == 300.0


# --- Collections ---

async def test_partial_then_full_collection(db, wallet_service):
    await _receivable(db, amount=10000.0)

    partial = await wallet_service.collect_pending_payment("rec-1", 4000.0)
    assert partial.pending_amount == 6000.0
    assert partial.status is ReceivableStatus.PENDING

    full = await wallet_service.collect_pending_payment("rec-1", 6000.0)
    assert full.pending_amount == 0.0
    assert full.status is ReceivableStatus.RECEIVED

    stored = await db["receivables"].find_one({"_id": "rec-1"})
    assert stored["status"] == "Received"
    assert stored["pending_amount"] == 0.0


async def test_collecting_more_than_pending_is_rejected(db, wallet_service):
    await _receivable(db, amount=1000.0)

    with pytest.raises(CollectionExceedsPendingError):
        await wallet_service.collect_pending_payment("rec-1", 1500.0)

    assert (await db["receivables"].find_one({"_id": "rec-1"}))["pending_amount"] == 1000.0


async def test_collecting_settled_receivable_is_rejected(db, wallet_service):
    await _receivable(db, status="Received")

    with pytest.raises(ReceivableNotPendingError) as exc_info:
        await wallet_service.collect_pending_payment("rec-1", 10.0)
    assert str(exc_info.value) == "This payment is not pending."


# --- Overview / listings ---

async def test_overview_initialises_an_empty_wallet(db, wallet_service):
    overview = await wallet_service.get_wallet_overview()

    assert overview.total_balance == 0.0
    assert overview.revenue == 0.0
    assert overview.payable == 0.0
    assert overview.receivable == 0.0
    assert await count(db, "wallet") == 1


async def test_overview_sums_only_pending_entries(db, wallet_service):
    await _summary(db, total_balance=750.0, revenue=30000.0)
    await _payable(db, "pay-1", amount=1000.0)
    await _payable(db, "pay-2", amount=250.5)
    await _payable(db, "pay-3", amount=9999.0, status="Paid")
    await _receivable(db, "rec-1", amount=10000.0)
    await _receivable(db, "rec-2", amount=20000.0, status="Received")

    overview = await wallet_service.get_wallet_overview()

    assert overview.total_balance == 750.0
    assert overview.revenue == 30000.0
    assert overview.payable == 1250.5
    assert overview.receivable == 10000.0


async def test_pending_receivables_for_partner(db, wallet_service):
    await _receivable(db, "rec-1", partner_id="PC1001", date="2024-05-01")
    await _receivable(db, "rec-2", partner_id="PC1001", date="2024-05-03")
    await _receivable(db, "rec-3", partner_id="PC1001", status="Received")
    await _receivable(db, "rec-4", partner_id="PC2002")

    pending = await wallet_service.list_pending_receivables_for_partner("PC1001")

    assert [r.id for r in pending] == ["rec-2", "rec-1"]


async def test_settled_sale_flows_through_to_balance(db, order_service, wallet_service):
    await seed_partner(db)
    await seed_catalog(db, selling_price=20000, earning_type="Fixed rate", earning=500)
    await seed_enquiry(db)
    await order_service.confirm_enquiry("enq-1")

    receivable = (await wallet_service.list_receivables())[0]
    payable = (await wallet_service.list_payables())[0]

    await wallet_service.update_receivable_status(receivable.id, ReceivableStatus.RECEIVED)
    await wallet_service.update_payable_status(payable.id, PayableStatus.PAID)

    overview = await wallet_service.get_wallet_overview()
    assert overview.revenue == 20000
    assert overview.total_balance == 19500
    assert overview.payable == 0
    assert overview.receivable == 0
    assert len(await wallet_service.list_payment_history()) == 2
