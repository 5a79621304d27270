"""
HUB3 (HRVHUB30) payload for Croatian 2D-barcode payment slips.

The payload is the text a PDF417 barcode on the slip encodes; the UI shows it as the
slip preview. One value per line, in this order:

    HRVHUB30, currency, amount (cents, 15 digits), payer name/street/place,
    receiver name/street/place, IBAN, model, reference, purpose code, description
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from uplatimi.domains.payment.record import PaymentRecord
from uplatimi.utils.config import slip_currency
from uplatimi.utils.logger import get_logger

logger = get_logger()

HUB3_HEADER = "HRVHUB30"
AMOUNT_WIDTH = 15


def amount_to_cents(amount: str) -> int:
    """Canonical amount ("12.5", "7.", "") to integer cents (1250, 700, 0)."""
    if not amount:
        return 0
    try:
        value = Decimal(amount.rstrip(".") or "0")
    except InvalidOperation:
        logger.warning("Non-canonical amount on slip: %r", amount)
        return 0
    return int(value * 100)


def _model_code(model: str) -> str:
    m = (model or "").strip().upper()
    if m and not m.startswith("HR"):
        m = f"HR{m}"
    return m


def build_hub3_payload(record: PaymentRecord, currency: str = "EUR") -> str:
    cents = amount_to_cents(record.amount)
    lines = [
        HUB3_HEADER,
        currency,
        str(cents).zfill(AMOUNT_WIDTH),
        "",  # payer name
        "",  # payer street
        "",  # payer place
        record.receiver_name,
        record.receiver_street,
        record.receiver_place,
        record.iban.replace(" ", "").upper(),
        _model_code(record.model),
        record.reference,
        record.purpose.upper(),
        record.description,
    ]
    return "".join(f"{line}\n" for line in lines)


class Hub3SlipRenderer:
    """Renderer collaborator: called with a record whenever the visible slip must change."""

    def __init__(self, currency: str | None = None) -> None:
        self.currency = currency or slip_currency()
        self.last_record: PaymentRecord | None = None
        self.last_payload: str = ""
        self.render_count = 0

    def __call__(self, record: PaymentRecord) -> str:
        self.last_record = record
        self.last_payload = build_hub3_payload(record, self.currency)
        self.render_count += 1
        return self.last_payload
