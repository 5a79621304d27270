"""
Page controller for the payment-slip form: edits, share-link generation and the
flags the UI shows (loading, failed, invalid link).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from uplatimi.domains.payment.record import PaymentRecord
from uplatimi.infrastructure.shortener.yourls_client import ShorteningRequestError
from uplatimi.services.record_store import PaymentRecordStore
from uplatimi.services.share_token import ShareTokenCodec, TokenDecodeError
from uplatimi.utils.logger import get_logger

logger = get_logger()

Renderer = Callable[[PaymentRecord], Any]
Clipboard = Callable[[str], Any]


class LinkState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    GENERATED = "generated"
    GENERATION_FAILED = "generation_failed"


@dataclass(frozen=True)
class LinkRequest:
    """One shortening request: the URL it was built with and what it was built against."""

    ticket: int
    record_version: int
    long_url: str


class SlipController:
    """
    Orchestrates the record store, share-token codec, shortening client and slip
    renderer. All handlers run to completion before returning; only the shortening
    call does network IO.

    By default a completing request is applied even if the record changed or a newer
    request was started meanwhile (last response wins). ``discard_stale_links=True``
    drops such completions instead.
    """

    def __init__(
        self,
        store: PaymentRecordStore,
        shortener: Any,
        renderer: Renderer,
        origin: str,
        codec: ShareTokenCodec | None = None,
        discard_stale_links: bool = False,
    ) -> None:
        self._store = store
        self._shortener = shortener
        self._renderer = renderer
        self._origin = origin.rstrip("/")
        self._codec = codec or ShareTokenCodec()
        self._discard_stale = discard_stale_links

        self.generated_link = ""
        self.is_link_generating = False
        self.is_link_invalid = False
        self.has_failed_to_generate_link = False
        self.has_page_loaded = False

        self._ticket = 0
        self._record_version = 0

    # --- state ---

    @property
    def data(self) -> PaymentRecord:
        """The local record."""
        return self._store.local

    @property
    def payment_data(self) -> PaymentRecord | None:
        """The imported record, when the page was opened from a share link."""
        return self._store.imported

    @property
    def state(self) -> LinkState:
        if self.is_link_generating:
            return LinkState.GENERATING
        if self.generated_link:
            return LinkState.GENERATED
        if self.has_failed_to_generate_link:
            return LinkState.GENERATION_FAILED
        return LinkState.IDLE

    @property
    def share_url(self) -> str:
        """Long URL sharing the local record (never the imported one)."""
        return self._codec.share_url(self._origin, self._store.local)

    # --- page load ---

    def initialize(self, token: str | None = None) -> None:
        """
        Load the local record and read the share token. Runs once; later calls
        are ignored so the token is never re-read.
        """
        if self.has_page_loaded:
            logger.debug("initialize called again; ignoring")
            return
        self._store.load()
        if token:
            try:
                imported = self._codec.decode(token)
            except TokenDecodeError as e:
                logger.warning("Invalid share link: %s", e)
                self.is_link_invalid = True
            else:
                self.on_imported_record_set(imported)
        if not self._store.has_imported:
            self._store.save(self._store.local)
            self._on_local_record_changed(self._store.local)
        self.has_page_loaded = True

    def on_imported_record_set(self, record: PaymentRecord) -> None:
        """Show a shared record. Side effect: renders it."""
        self._store.set_imported(record)
        self._renderer(record)

    # --- edits ---

    def edit_amount(self, raw: str) -> PaymentRecord:
        """
        Amount field edit. Local mode: persist, re-render, clear the short link.
        Shared mode: adjusts the imported record's amount only.
        """
        record = self._store.update(lambda r: r.with_amount(raw))
        if self._store.has_imported:
            self._renderer(record)
        else:
            self._on_local_record_changed(record)
        return record

    def edit_text(self, field: str, raw: str) -> PaymentRecord:
        """
        Text field edit (deburred, cut to the field limit). Local mode: persist,
        re-render, clear the short link. Shared mode: nothing changes.

        Raises:
            KeyError: If ``field`` is not a text field.
        """
        if self._store.has_imported:
            logger.debug("Ignoring %s edit while a shared record is shown", field)
            return self._store.local
        record = self._store.update(lambda r: r.with_text(field, raw))
        self._on_local_record_changed(record)
        return record

    def edit_payment_amount(self, raw: str) -> PaymentRecord | None:
        """Adjust the imported record's amount in memory and re-render it."""
        record = self._store.update_imported_amount(raw)
        if record is not None:
            self._renderer(record)
        return record

    def _on_local_record_changed(self, record: PaymentRecord) -> None:
        self._record_version += 1
        self.generated_link = ""
        self.has_failed_to_generate_link = False
        self._renderer(record)

    # --- share link ---

    def begin_link_generation(self) -> LinkRequest:
        """Mark generation as running and return the request to send."""
        self._ticket += 1
        self.is_link_generating = True
        return LinkRequest(self._ticket, self._record_version, self.share_url)

    def _is_stale(self, request: LinkRequest) -> bool:
        return request.ticket != self._ticket or request.record_version != self._record_version

    def _finish(self, request: LinkRequest) -> bool:
        """Clear the loading flag; return False when the result must be dropped."""
        if self._discard_stale and self._is_stale(request):
            if request.ticket == self._ticket:
                self.is_link_generating = False
            logger.info("Discarding stale shortening result (request %d)", request.ticket)
            return False
        self.is_link_generating = False
        return True

    def complete_link_generation(self, request: LinkRequest, short_url: str) -> None:
        if not self._finish(request):
            return
        self.has_failed_to_generate_link = False
        self.generated_link = short_url

    def fail_link_generation(self, request: LinkRequest, error: Exception) -> None:
        if not self._finish(request):
            return
        logger.warning("Link generation failed: %s", error)
        self.generated_link = ""
        self.has_failed_to_generate_link = True

    def generate_link(self) -> LinkState:
        """
        Shorten the local record's share URL. No retry; call again to retry.

        Errors other than ShorteningRequestError are re-raised after the request
        is marked failed, so the loading flag never stays set.
        """
        request = self.begin_link_generation()
        try:
            short_url = self._shortener.shorten(request.long_url)
        except ShorteningRequestError as e:
            self.fail_link_generation(request, e)
        except Exception as e:
            self.fail_link_generation(request, e)
            raise
        else:
            self.complete_link_generation(request, short_url)
        return self.state

    def copy_link(self, clipboard: Clipboard) -> bool:
        """Hand the current short link to the clipboard collaborator."""
        if not self.generated_link:
            return False
        clipboard(self.generated_link)
        return True
