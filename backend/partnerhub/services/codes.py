# partnerhub/services/codes.py
# Human-readable codes: fixed prefix + random digits. Low collision odds, not guaranteed unique.

import secrets
from bson import ObjectId
from partnerhub.core.config import settings

def _random_digits(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))

def new_document_id() -> str:
    return str(ObjectId())

def new_enquiry_code() -> str:
    return f"{settings.ENQUIRY_CODE_PREFIX}{_random_digits(8)}"

def new_customer_code() -> str:
    return f"{settings.CUSTOMER_CODE_PREFIX}{_random_digits(10)}"

def new_payment_transaction_id() -> str:
    return f"{settings.PAYMENT_TXN_PREFIX}{_random_digits(12)}"
