# partnerhub/db/schemas/partner_schemas.py
# Partner accounts and profiles, read by the settlement engine

from typing import Optional
from enum import Enum
from .common_schemas import DocModel

class PartnerCategory(str, Enum):
    AFFILIATE = "Affiliate Partner"
    SUPER_AFFILIATE = "Super Affiliate Partner"
    ASSOCIATE = "Associate Partner"
    CHANNEL = "Channel Partner"

class UserDoc(DocModel):
    """Login account of a partner (or any other role)."""
    name: str
    role: Optional[str] = None
    partner_code: Optional[str] = None
    partner_profile_id: Optional[str] = None

class PartnerProfileDoc(DocModel):
    """Extended partner attributes; only the tier matters for commission."""
    partner_category: PartnerCategory
    user_id: Optional[str] = None
