"""
Share token codec: PaymentRecord <-> URL-safe base64 of its serialized JSON.
"""

from __future__ import annotations

import base64
import json

from uplatimi.domains.payment.record import PaymentRecord, serialize_record

QUERY_KEY = "p"


class TokenDecodeError(ValueError):
    """Raised when a share token cannot be turned back into a PaymentRecord."""


def _to_standard_alphabet(token: str) -> str:
    # Query-string decoding turns "+" into a space; URL-safe tokens use "-" and "_".
    t = token.strip().replace(" ", "+").replace("-", "+").replace("_", "/").rstrip("=")
    return t + "=" * (-len(t) % 4)


class ShareTokenCodec:
    """Encodes the same compact, deburred JSON that goes to local storage."""

    query_key = QUERY_KEY

    def encode(self, record: PaymentRecord) -> str:
        raw = serialize_record(record).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    def decode(self, token: str) -> PaymentRecord:
        """
        Parse a token produced by :meth:`encode` (or a standard base64 one).

        Field values are brought back to canonical form (normalized amount,
        deburred text within the field limits), as if typed into the form.

        Raises:
            TokenDecodeError: If the token is not base64, not UTF-8 JSON, not an
                object, or holds non-string field values.
        """
        if not token or not token.strip():
            raise TokenDecodeError("Empty share token")
        try:
            raw = base64.b64decode(_to_standard_alphabet(token), validate=True)
            text = raw.decode("utf-8")
            data = json.loads(text)
        except (ValueError, RecursionError) as e:
            # non-ASCII input makes b64decode raise a bare ValueError
            raise TokenDecodeError(f"Share token is not a valid encoded record: {e}") from e
        if not isinstance(data, dict):
            raise TokenDecodeError(f"Share token holds {type(data).__name__}, expected an object")
        try:
            return PaymentRecord.from_dict(data).canonical()
        except ValueError as e:
            raise TokenDecodeError(str(e)) from e

    def share_url(self, origin: str, record: PaymentRecord) -> str:
        """``<origin>?p=<token>`` for the given record."""
        return f"{origin}?{self.query_key}={self.encode(record)}"
