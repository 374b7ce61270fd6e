# partnerhub/db/schemas/__init__.py
# Make schemas easily importable
from .common_schemas import DocModel, ActionResult
from .partner_schemas import PartnerCategory, UserDoc, PartnerProfileDoc
from .catalog_schemas import EarningType, CatalogDoc
from .enquiry_schemas import EnquiryStatus, SubmittedBy, EnquiryCreate, EnquiryDoc
from .customer_schemas import CustomerDoc
from .ledger_schemas import (
    PayableStatus, ReceivableStatus, PaymentType,
    PayableDoc, ReceivableDoc, PaymentHistoryDoc, WalletSummaryDoc, WalletOverview,
    PayableStatusUpdate, ReceivableStatusUpdate, CollectPaymentInput,
)
