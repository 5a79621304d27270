"""Page orchestration."""

from uplatimi.orchestration.slip_controller import LinkRequest, LinkState, SlipController

__all__ = ["LinkRequest", "LinkState", "SlipController"]
