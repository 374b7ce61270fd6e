# partnerhub/db/schemas/customer_schemas.py
from pydantic import Field
from typing import Optional
from datetime import datetime, timezone
from .common_schemas import DocModel

class CustomerDoc(DocModel):
    """Customer record, unique by email."""
    customer_code: str
    name: str
    email: str
    phone: Optional[str] = None
    pincode: Optional[str] = None
    created_by: str # Partner user id that brought the customer in
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    seller_id: Optional[str] = None
