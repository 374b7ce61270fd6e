"""Commission resolution: rule order and arithmetic."""

import pytest

from partnerhub.db.schemas.catalog_schemas import CatalogDoc, EarningType
from partnerhub.db.schemas.partner_schemas import PartnerCategory
from partnerhub.modules.orders.commission import CommissionRule, resolve_commission


def _catalog(**overrides) -> CatalogDoc:
    doc = {
        "_id": "cat-1",
        "title": "Sea View Villa",
        "selling_price": 20000.0,
        "earning_type": "reward point",
        "earning": 0.0,
        "partner_category_commissions": {},
    }
    doc.update(overrides)
    return CatalogDoc.model_validate(doc)


def test_category_override_beats_fixed_rate():
    catalog = _catalog(
        partner_category_commissions={"Affiliate Partner": 5},
        earning_type="Fixed rate",
        earning=500,
    )
    result = resolve_commission(catalog, PartnerCategory.AFFILIATE)
    assert result.amount == 1000.0
    assert result.rule is CommissionRule.CATEGORY_OVERRIDE
    assert result.rate == 5


def test_category_override_only_applies_to_matching_tier():
    catalog = _catalog(
        partner_category_commissions={"Channel Partner": 10},
        earning_type="commission",
        earning=2,
    )
    result = resolve_commission(catalog, PartnerCategory.AFFILIATE)
    assert result.rule is CommissionRule.PERCENTAGE
    assert result.amount == 400.0


def test_zero_category_percentage_falls_through():
    catalog = _catalog(
        partner_category_commissions={"Affiliate Partner": 0},
        earning_type="Fixed rate",
        earning=750,
    )
    result = resolve_commission(catalog, PartnerCategory.AFFILIATE)
    assert result.rule is CommissionRule.FIXED_RATE
    assert result.amount == 750.0


def test_fixed_rate_ignores_price():
    cheap = resolve_commission(_catalog(selling_price=1000, earning_type="Fixed rate", earning=300), None)
    dear = resolve_commission(_catalog(selling_price=900000, earning_type="Fixed rate", earning=300), None)
    assert cheap.amount == dear.amount == 300.0


def test_percentage_is_rounded_to_paise():
    result = resolve_commission(_catalog(selling_price=999.99, earning_type="commission", earning=3), None)
    assert result.amount == 30.0


def test_category_override_is_rounded_to_paise():
    catalog = _catalog(selling_price=333.33, partner_category_commissions={"Associate Partner": 7})
    result = resolve_commission(catalog, PartnerCategory.ASSOCIATE)
    assert result.amount == 23.33


@pytest.mark.parametrize("earning_type", [EarningType.REWARD_POINT, EarningType.PARTNER_CATEGORY_COMMISSION])
def test_types_without_cash_commission_pay_nothing(earning_type):
    result = resolve_commission(_catalog(earning_type=earning_type.value, earning=50), PartnerCategory.ASSOCIATE)
    assert result.amount == 0.0
    assert result.rule is CommissionRule.NONE


def test_unknown_category_key_is_rejected_by_schema():
    with pytest.raises(ValueError):
        _catalog(partner_category_commissions={"Gold Partner": 5})


def test_catalog_currency_defaults_to_configured_currency():
    assert _catalog().currency == "INR"
