# partnerhub/db/schemas/catalog_schemas.py
from pydantic import Field
from typing import Dict, Optional
from enum import Enum
from .common_schemas import DocModel
from .partner_schemas import PartnerCategory
from partnerhub.core.config import settings

class EarningType(str, Enum):
    FIXED_RATE = "Fixed rate"
    COMMISSION = "commission"
    REWARD_POINT = "reward point"
    PARTNER_CATEGORY_COMMISSION = "partner-category commission"

class CatalogDoc(DocModel):
    """A sellable listing. Never modified by settlement."""
    title: str
    catalog_code: Optional[str] = None
    selling_price: float = Field(..., ge=0)
    currency: str = settings.DEFAULT_CURRENCY
    earning_type: EarningType = EarningType.REWARD_POINT
    earning: float = Field(0.0, ge=0) # Flat amount or percentage depending on earning_type
    # Percentage per partner tier; overrides earning_type when > 0
    partner_category_commissions: Dict[PartnerCategory, float] = Field(default_factory=dict)
    seller_id: Optional[str] = None
