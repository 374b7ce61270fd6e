# partnerhub/modules/orders/commission.py
"""Commission owed to a partner for one confirmed sale.

Rules are tried in a fixed order and the first that applies wins:

1. the catalog's percentage for the partner's category, when it is > 0;
2. ``earning_type == commission``: ``earning`` is a percentage of the price;
3. ``earning_type == Fixed rate``: ``earning`` is a flat amount;
4. anything else (reward points, category commission without an entry
   for this partner's tier) pays nothing.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel
from partnerhub.db.schemas.catalog_schemas import CatalogDoc, EarningType
from partnerhub.db.schemas.partner_schemas import PartnerCategory

class CommissionRule(str, Enum):
    CATEGORY_OVERRIDE = "category_override"
    PERCENTAGE = "percentage"
    FIXED_RATE = "fixed_rate"
    NONE = "none"

class CommissionResult(BaseModel):
    amount: float
    rule: CommissionRule
    rate: Optional[float] = None # Percentage applied, if any

# Currency rule: commission amounts are rounded to whole paise (2 decimals)
def _percent_of(price: float, percentage: float) -> float:
    return round(price * percentage / 100, 2)

def resolve_commission(catalog: CatalogDoc, partner_category: Optional[PartnerCategory]) -> CommissionResult:
    category_pct = catalog.partner_category_commissions.get(partner_category) if partner_category else None
    if category_pct and category_pct > 0:
        return CommissionResult(
            amount=_percent_of(catalog.selling_price, category_pct),
            rule=CommissionRule.CATEGORY_OVERRIDE,
            rate=category_pct,
        )

    if catalog.earning_type is EarningType.COMMISSION:
        return CommissionResult(
            amount=_percent_of(catalog.selling_price, catalog.earning),
            rule=CommissionRule.PERCENTAGE,
            rate=catalog.earning,
        )
    if catalog.earning_type is EarningType.FIXED_RATE:
        return CommissionResult(amount=round(catalog.earning, 2), rule=CommissionRule.FIXED_RATE)
    if catalog.earning_type in (EarningType.REWARD_POINT, EarningType.PARTNER_CATEGORY_COMMISSION):
        return CommissionResult(amount=0.0, rule=CommissionRule.NONE)

    raise ValueError(f"Unhandled earning type: {catalog.earning_type!r}")
