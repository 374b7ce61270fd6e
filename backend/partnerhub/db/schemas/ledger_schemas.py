# partnerhub/db/schemas/ledger_schemas.py
# Payables, receivables, payment history and the platform wallet summary

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum
from .common_schemas import DocModel

# --- Enums ---
class PayableStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"

class ReceivableStatus(str, Enum):
    PENDING = "Pending"
    RECEIVED = "Received"

class PaymentType(str, Enum):
    CREDIT = "Credit"
    DEBIT = "Debit"

# --- Documents ---
class PayableDoc(DocModel):
    """Money owed by the platform to a partner."""
    date: str # ISO date, YYYY-MM-DD
    recipient_name: str
    recipient_id: str # Partner code when the partner has one, else user id
    payable_amount: float = Field(..., ge=0)
    status: PayableStatus = PayableStatus.PENDING
    description: str = ""
    seller_id: Optional[str] = None
    enquiry_id: Optional[str] = None

class ReceivableDoc(DocModel):
    """Money owed to the platform for a confirmed sale."""
    date: str
    partner_name: str
    partner_id: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    total_amount: float = Field(0.0, ge=0)
    pending_amount: float
    status: ReceivableStatus = ReceivableStatus.PENDING
    description: str = ""
    seller_id: Optional[str] = None
    enquiry_id: Optional[str] = None

class PaymentHistoryDoc(DocModel):
    date: str
    name: str
    transaction_id: str
    amount: float
    payment_method: str
    type: PaymentType

class WalletSummaryDoc(DocModel):
    """Platform-wide singleton aggregate. Only mutated inside transactions."""
    total_balance: float = 0.0
    revenue: float = 0.0

# --- API models ---
class WalletOverview(BaseModel):
    total_balance: float
    revenue: float
    payable: float # Sum of pending payables
    receivable: float # Sum of pending receivables' outstanding amounts

class PayableStatusUpdate(BaseModel):
    status: PayableStatus

class ReceivableStatusUpdate(BaseModel):
    status: ReceivableStatus

class CollectPaymentInput(BaseModel):
    amount_collected: float = Field(..., ge=0.01, description="Amount must be greater than zero.")
