"""Payment-slip renderers."""

from uplatimi.rendering.hub3 import Hub3SlipRenderer, amount_to_cents, build_hub3_payload

__all__ = ["Hub3SlipRenderer", "amount_to_cents", "build_hub3_payload"]
