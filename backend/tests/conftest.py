import os

# Settings are loaded at import time and require a URI
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/partnerhub_test")

import pytest

from fake_mongo import FakeMongoClient
from partnerhub.db.mongo_client import ensure_indexes
from partnerhub.modules.orders.repository import (
    EnquiryRepository, CatalogRepository, PartnerRepository, CustomerRepository,
)
from partnerhub.modules.orders.service import OrderService
from partnerhub.modules.wallet.repository import LedgerRepository
from partnerhub.modules.wallet.service import WalletService
from partnerhub.services.audit_service import AuditService


@pytest.fixture
def mongo_client() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture
async def db(mongo_client):
    database = mongo_client["partnerhub_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
def order_service(db) -> OrderService:
    return OrderService(
        enquiry_repo=EnquiryRepository(db),
        catalog_repo=CatalogRepository(db),
        partner_repo=PartnerRepository(db),
        customer_repo=CustomerRepository(db),
        ledger_repo=LedgerRepository(db),
        audit_service=AuditService(db),
        db=db,
    )


@pytest.fixture
def wallet_service(db) -> WalletService:
    return WalletService(ledger_repo=LedgerRepository(db), audit_service=AuditService(db), db=db)
