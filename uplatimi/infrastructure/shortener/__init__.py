"""Link shortening service clients."""

from uplatimi.infrastructure.shortener.yourls_client import (
    ShorteningRequestError,
    YourlsClient,
    generate_keyword,
)

__all__ = ["ShorteningRequestError", "YourlsClient", "generate_keyword"]
