"""Payment slip domain: record model and amount normalization."""

from uplatimi.domains.payment.amount import MAX_AMOUNT_LENGTH, clamp_amount, normalize_amount
from uplatimi.domains.payment.record import (
    DEFAULT_MODEL,
    FIELD_LIMITS,
    TEXT_FIELDS,
    PaymentRecord,
    serialize_record,
)

__all__ = [
    "DEFAULT_MODEL",
    "FIELD_LIMITS",
    "MAX_AMOUNT_LENGTH",
    "TEXT_FIELDS",
    "PaymentRecord",
    "clamp_amount",
    "normalize_amount",
    "serialize_record",
]
