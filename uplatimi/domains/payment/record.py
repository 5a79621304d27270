"""
PaymentRecord: the payment-slip data shared between the form, storage and share links.

Attribute names are snake_case; the serialized form keeps the camelCase keys used by
already stored records and already shared links.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from uplatimi.domains.payment.amount import MAX_AMOUNT_LENGTH, clamp_amount
from uplatimi.utils.text import deburr

DEFAULT_MODEL = "HR99"

# attribute -> serialized key
WIRE_KEYS: dict[str, str] = {
    "amount": "amount",
    "purpose": "purpose",
    "description": "description",
    "iban": "iban",
    "model": "model",
    "reference": "reference",
    "receiver_name": "receiverName",
    "receiver_street": "receiverStreet",
    "receiver_place": "receiverPlace",
}

# HUB3 field widths
FIELD_LIMITS: dict[str, int] = {
    "amount": MAX_AMOUNT_LENGTH,
    "purpose": 4,
    "description": 35,
    "iban": 21,
    "model": 4,
    "reference": 22,
    "receiver_name": 25,
    "receiver_street": 25,
    "receiver_place": 27,
}

TEXT_FIELDS: tuple[str, ...] = tuple(k for k in WIRE_KEYS if k != "amount")


@dataclass(frozen=True, slots=True)
class PaymentRecord:
    """A single payment slip. All values are strings; ``amount`` is canonical or empty."""

    amount: str = ""
    purpose: str = ""
    description: str = ""
    iban: str = ""
    model: str = DEFAULT_MODEL
    reference: str = ""
    receiver_name: str = ""
    receiver_street: str = ""
    receiver_place: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialized (camelCase) mapping."""
        return {WIRE_KEYS[k]: v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaymentRecord:
        """
        Build a record from a serialized mapping.

        Unknown keys are ignored and missing keys keep their defaults.

        Raises:
            ValueError: If a known key holds a non-string value.
        """
        values: dict[str, str] = {}
        for f in fields(cls):
            key = WIRE_KEYS[f.name]
            if key not in data:
                continue
            val = data[key]
            if not isinstance(val, str):
                raise ValueError(f"Field {key!r} must be a string, got {type(val).__name__}")
            values[f.name] = val
        return cls(**values)

    def with_amount(self, raw: str) -> PaymentRecord:
        """Copy with ``amount`` set from free-form input (normalized, clamped)."""
        return replace(self, amount=clamp_amount(raw))

    def with_text(self, field: str, raw: str) -> PaymentRecord:
        """
        Copy with a text field set: deburred, then cut to the field's limit.

        Raises:
            KeyError: If ``field`` is not a text field of the record.
        """
        if field not in TEXT_FIELDS:
            raise KeyError(f"Unknown text field: {field}")
        return replace(self, **{field: deburr(raw or "")[: FIELD_LIMITS[field]]})

    def canonical(self) -> PaymentRecord:
        """Copy with every field passed through the same rules as form input."""
        record = self.with_amount(self.amount)
        for field in TEXT_FIELDS:
            record = record.with_text(field, getattr(self, field))
        return record


def serialize_record(record: PaymentRecord) -> str:
    """Compact JSON of the record with diacritics stripped from the whole text."""
    return deburr(json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":")))
