# partnerhub/db/schemas/enquiry_schemas.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
from .common_schemas import DocModel

class EnquiryStatus(str, Enum):
    NEW = "New"
    CONTACTED = "Contacted"
    CONFIRMED = "Confirmed"
    CLOSED = "Closed"

class SubmittedBy(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    role: str

class EnquiryCreate(BaseModel):
    """Payload of the public enquiry form."""
    catalog_id: str = Field(..., min_length=1)
    catalog_code: str
    catalog_title: str
    customer_name: str = Field(..., min_length=1, description="Name is required")
    customer_phone: str = Field(..., min_length=1, description="A valid phone number is required")
    customer_email: EmailStr
    customer_pincode: str = Field(..., min_length=1, description="Pincode or City is required")
    submitted_by: SubmittedBy

class EnquiryDoc(DocModel):
    """MongoDB document representing a customer lead against a catalog."""
    enquiry_code: str
    catalog_id: str
    # Copied from the catalog at submission time, not re-synced
    catalog_code: Optional[str] = None
    catalog_title: Optional[str] = None
    customer_name: str
    customer_phone: str
    customer_email: str
    customer_pincode: Optional[str] = None
    submitted_by: SubmittedBy
    seller_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: EnquiryStatus = EnquiryStatus.NEW
