"""
Tests for SlipController: page load, edits, shared records, link generation state.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from uplatimi.domains.payment.record import PaymentRecord, serialize_record
from uplatimi.infrastructure.shortener.yourls_client import ShorteningRequestError
from uplatimi.infrastructure.storage.local_storage import MemoryStorage
from uplatimi.orchestration.slip_controller import LinkState, SlipController
from uplatimi.services.record_store import STORAGE_KEY, PaymentRecordStore
from uplatimi.services.share_token import ShareTokenCodec

ORIGIN = "https://uplatimi.test"


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def renderer() -> MagicMock:
    return MagicMock()


@pytest.fixture
def shortener() -> MagicMock:
    s = MagicMock()
    s.shorten.return_value = "https://u.test/abc"
    return s


def _controller(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock, **kwargs) -> SlipController:
    return SlipController(
        store=PaymentRecordStore(storage),
        shortener=shortener,
        renderer=renderer,
        origin=ORIGIN,
        **kwargs,
    )


@pytest.fixture
def controller(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> SlipController:
    c = _controller(storage, renderer, shortener)
    c.initialize(None)
    return c


def _stored(storage: MemoryStorage) -> dict:
    return json.loads(storage.items[STORAGE_KEY])


# --- page load ---

def test_fresh_load_uses_default_record(controller: SlipController, storage: MemoryStorage, renderer: MagicMock) -> None:
    assert controller.data == PaymentRecord()
    assert controller.payment_data is None
    assert controller.has_page_loaded
    assert not controller.is_link_invalid
    assert controller.state == LinkState.IDLE
    assert _stored(storage)["model"] == "HR99"
    renderer.assert_called_once_with(PaymentRecord())


def test_fresh_load_then_amount_edit(controller: SlipController, storage: MemoryStorage) -> None:
    controller.edit_amount("12,5")
    assert _stored(storage)["amount"] == "12.5"
    assert controller.data.amount == "12.5"


def test_load_with_shared_token(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> None:
    own = PaymentRecord(amount="3", receiver_name="Me")
    storage.items[STORAGE_KEY] = serialize_record(own)
    shared = PaymentRecord(amount="10", iban="HR123")
    c = _controller(storage, renderer, shortener)

    c.initialize(ShareTokenCodec().encode(shared))

    assert c.payment_data == shared
    assert c.data == own
    assert storage.writes == []
    renderer.assert_called_once_with(shared)


def test_invalid_token_falls_back_to_own_record(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> None:
    c = _controller(storage, renderer, shortener)
    c.initialize("%%%definitely-not-a-token")
    assert c.is_link_invalid
    assert c.payment_data is None
    assert c.has_page_loaded
    renderer.assert_called_once_with(PaymentRecord())
    assert STORAGE_KEY in storage.items


@pytest.mark.parametrize("token", ["čćž", "é", "eyJ9ž"])
def test_non_ascii_token_marks_link_invalid(
    storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock, token: str
) -> None:
    c = _controller(storage, renderer, shortener)
    c.initialize(token)
    assert c.is_link_invalid
    assert c.has_page_loaded
    assert c.payment_data is None
    renderer.assert_called_once_with(PaymentRecord())


def test_corrupt_storage_loads_default(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> None:
    storage.items[STORAGE_KEY] = "{not json"
    c = _controller(storage, renderer, shortener)
    c.initialize(None)
    assert c.data == PaymentRecord()


def test_token_is_read_once(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> None:
    c = _controller(storage, renderer, shortener)
    c.initialize(None)
    c.initialize(ShareTokenCodec().encode(PaymentRecord(amount="10")))
    assert c.payment_data is None
    assert renderer.call_count == 1


# --- local edits ---

def test_every_local_edit_is_persisted(controller: SlipController, storage: MemoryStorage) -> None:
    controller.edit_text("receiver_name", "Đuro Šimić")
    controller.edit_text("iban", "HR1210010051863000160")
    controller.edit_amount("99,999")
    assert storage.items[STORAGE_KEY] == serialize_record(controller.data)
    stored = _stored(storage)
    assert stored["receiverName"] == "Duro Simic"
    assert stored["iban"] == "HR1210010051863000160"
    assert stored["amount"] == "99.99"


def test_local_edit_rerenders(controller: SlipController, renderer: MagicMock) -> None:
    controller.edit_text("description", "Rent")
    renderer.assert_called_with(controller.data)
    assert renderer.call_args.args[0].description == "Rent"


def test_edit_clears_generated_link(controller: SlipController) -> None:
    controller.generate_link()
    assert controller.state == LinkState.GENERATED
    controller.edit_text("reference", "123")
    assert controller.generated_link == ""
    assert controller.state == LinkState.IDLE


def test_edit_clears_failure(controller: SlipController, shortener: MagicMock) -> None:
    shortener.shorten.side_effect = ShorteningRequestError("down")
    controller.generate_link()
    controller.edit_amount("1")
    assert controller.state == LinkState.IDLE


def test_unknown_field_raises(controller: SlipController) -> None:
    with pytest.raises(KeyError):
        controller.edit_text("payer", "x")


# --- shared record ---

@pytest.fixture
def shared_controller(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> SlipController:
    storage.items[STORAGE_KEY] = serialize_record(PaymentRecord(amount="3"))
    c = _controller(storage, renderer, shortener)
    c.initialize(ShareTokenCodec().encode(PaymentRecord(amount="10", iban="HR123")))
    return c


def test_shared_amount_edit_stays_in_memory(shared_controller: SlipController, storage: MemoryStorage, renderer: MagicMock) -> None:
    before = storage.items[STORAGE_KEY]
    shared_controller.edit_payment_amount("25,999")
    assert shared_controller.payment_data.amount == "25.99"
    assert shared_controller.data.amount == "3"
    assert storage.items[STORAGE_KEY] == before
    assert storage.writes == []
    renderer.assert_called_with(shared_controller.payment_data)


def test_amount_field_edits_shared_record(shared_controller: SlipController, storage: MemoryStorage) -> None:
    shared_controller.edit_amount("40")
    assert shared_controller.payment_data.amount == "40"
    assert shared_controller.data.amount == "3"
    assert storage.writes == []


def test_text_edit_ignored_while_shared(shared_controller: SlipController, storage: MemoryStorage) -> None:
    shared_controller.edit_text("receiver_name", "Someone")
    assert shared_controller.data.receiver_name == ""
    assert shared_controller.payment_data.receiver_name == ""
    assert storage.writes == []


def test_payment_amount_edit_without_shared_record(controller: SlipController) -> None:
    assert controller.edit_payment_amount("5") is None


def test_generated_link_shares_local_record(shared_controller: SlipController, shortener: MagicMock) -> None:
    shared_controller.generate_link()
    long_url = shortener.shorten.call_args.args[0]
    token = long_url.split("?p=", 1)[1]
    assert ShareTokenCodec().decode(token) == PaymentRecord(amount="3")


# --- link generation ---

def test_generate_link_success(controller: SlipController, shortener: MagicMock) -> None:
    assert controller.generate_link() == LinkState.GENERATED
    assert controller.generated_link == "https://u.test/abc"
    assert not controller.is_link_generating
    assert not controller.has_failed_to_generate_link
    shortener.shorten.assert_called_once_with(controller.share_url)
    assert controller.share_url.startswith(f"{ORIGIN}?p=")


def test_generate_link_failure(controller: SlipController, shortener: MagicMock) -> None:
    shortener.shorten.side_effect = ShorteningRequestError("network down")
    assert controller.generate_link() == LinkState.GENERATION_FAILED
    assert controller.has_failed_to_generate_link
    assert not controller.is_link_generating
    assert controller.generated_link == ""


def test_unexpected_error_clears_loading_flag(controller: SlipController, shortener: MagicMock) -> None:
    shortener.shorten.side_effect = [OSError("socket closed"), "https://u.test/ok"]
    with pytest.raises(OSError):
        controller.generate_link()
    assert not controller.is_link_generating
    assert controller.state == LinkState.GENERATION_FAILED
    assert controller.generate_link() == LinkState.GENERATED


def test_retry_after_failure(controller: SlipController, shortener: MagicMock) -> None:
    shortener.shorten.side_effect = [ShorteningRequestError("down"), "https://u.test/ok"]
    controller.generate_link()
    assert controller.generate_link() == LinkState.GENERATED
    assert controller.generated_link == "https://u.test/ok"
    assert not controller.has_failed_to_generate_link
    assert shortener.shorten.call_count == 2


def test_generating_state_while_pending(controller: SlipController) -> None:
    controller.begin_link_generation()
    assert controller.state == LinkState.GENERATING
    assert controller.is_link_generating


def test_last_response_wins_by_default(controller: SlipController) -> None:
    first = controller.begin_link_generation()
    second = controller.begin_link_generation()
    controller.complete_link_generation(second, "https://u.test/second")
    controller.complete_link_generation(first, "https://u.test/first")
    assert controller.generated_link == "https://u.test/first"


def test_stale_result_applied_after_edit_by_default(controller: SlipController) -> None:
    request = controller.begin_link_generation()
    controller.edit_amount("7")
    controller.complete_link_generation(request, "https://u.test/old")
    assert controller.generated_link == "https://u.test/old"
    assert not controller.is_link_generating


def test_discard_stale_links_after_edit(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> None:
    c = _controller(storage, renderer, shortener, discard_stale_links=True)
    c.initialize(None)
    request = c.begin_link_generation()
    c.edit_amount("7")
    c.complete_link_generation(request, "https://u.test/old")
    assert c.generated_link == ""
    assert not c.is_link_generating
    assert c.state == LinkState.IDLE


def test_discard_superseded_request(storage: MemoryStorage, renderer: MagicMock, shortener: MagicMock) -> None:
    c = _controller(storage, renderer, shortener, discard_stale_links=True)
    c.initialize(None)
    first = c.begin_link_generation()
    second = c.begin_link_generation()
    c.fail_link_generation(first, ShorteningRequestError("late"))
    assert c.is_link_generating
    assert not c.has_failed_to_generate_link
    c.complete_link_generation(second, "https://u.test/new")
    assert c.generated_link == "https://u.test/new"
    assert c.state == LinkState.GENERATED


# --- clipboard ---

def test_copy_link(controller: SlipController) -> None:
    clipboard = MagicMock()
    assert controller.copy_link(clipboard) is False
    clipboard.assert_not_called()
    controller.generate_link()
    assert controller.copy_link(clipboard) is True
    clipboard.assert_called_once_with("https://u.test/abc")
