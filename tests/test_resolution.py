"""Tests for set-default / remove target resolution (core/resolution.py).

The API client is a :class:`MagicMock` and the user is a scripted
``FakePrompter`` — no network, no terminal.

Coverage:
* Argument-count rejection before any API call.
* Empty collections short-circuit without prompting.
* Explicit ids skip the picker and are not validated.
* Picker aborts and declined confirmations never mutate.
* Removal of the default card and the follow-up fetch.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from billing_cli.core.card_service import CardService
from billing_cli.core.models import CardCollection
from billing_cli.core.resolution import (
    REMOVE_CONFIRMATION,
    SET_DEFAULT_CONFIRMATION,
    Resolution,
    TargetResolver,
    build_card_choices,
)
from billing_cli.exceptions import (
    ApiError,
    CardFetchError,
    DefaultCardRefreshError,
    InvalidArgumentsError,
)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _raw_card(card_id: str, **overrides: Any) -> dict[str, Any]:
    card: dict[str, Any] = {
        "id": card_id,
        "brand": "Visa",
        "last4": "1111",
        "name": f"Holder {card_id}",
        "address_line1": "1 Main St",
        "address_city": "Springfield",
        "address_zip": "62701",
        "address_country": "US",
    }
    card.update(overrides)
    return card


def _payload(*card_ids: str, default: str | None = None) -> dict[str, Any]:
    return {
        "cards": [_raw_card(card_id) for card_id in card_ids],
        "defaultCardId": default,
    }


def _resolver(client: MagicMock, prompter: Any) -> TargetResolver:
    return TargetResolver(CardService(client), prompter)


def _message() -> str:
    return "Pick a card"


# ---------------------------------------------------------------------------
# Picker choices
# ---------------------------------------------------------------------------

class TestBuildCardChoices:
    def test_one_choice_per_card_with_id_value(self) -> None:
        collection = CardService._parse_collection(_payload("a", "b", default="b"))
        choices = build_card_choices(collection)
        assert [choice.value for choice in choices] == ["a", "b"]

    def test_default_marker_only_on_default(self) -> None:
        collection = CardService._parse_collection(_payload("a", "b", default="b"))
        first, second = build_card_choices(collection)
        assert "(default)" not in first.label
        assert "ID: b (default)" in second.label

    def test_label_contains_name_and_masked_number(self) -> None:
        collection = CardService._parse_collection(_payload("a"))
        (choice,) = build_card_choices(collection)
        assert "  Holder a" in choice.label
        assert "Visa #### #### #### 1111" in choice.label

    def test_empty_collection(self) -> None:
        assert build_card_choices(CardCollection(cards=())) == []


# ---------------------------------------------------------------------------
# Shared behaviour of both subcommands
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("operation", ["set_default", "remove"])
class TestSharedResolution:
    def test_too_many_arguments_rejected_without_api_call(
        self, operation: str, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        prompter = prompter_factory()
        resolver = _resolver(client, prompter)

        with pytest.raises(InvalidArgumentsError, match="Invalid number of arguments"):
            getattr(resolver, operation)(["a", "b"], prompt_message=_message)

        client.list_cards.assert_not_called()
        client.set_default.assert_not_called()
        client.remove.assert_not_called()

    def test_empty_collection_skips_prompt(
        self, operation: str, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload()
        prompter = prompter_factory()

        result = getattr(_resolver(client, prompter), operation)(
            [], prompt_message=_message,
        )

        assert result.resolution is Resolution.NO_CARDS
        assert prompter.select_calls == []
        assert prompter.confirm_calls == []
        client.set_default.assert_not_called()
        client.remove.assert_not_called()

    def test_aborted_picker_makes_no_change(
        self, operation: str, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", "b", "c", default="a")
        prompter = prompter_factory(selection=None)

        result = getattr(_resolver(client, prompter), operation)(
            [], prompt_message=_message,
        )

        assert result.resolution is Resolution.NO_SELECTION
        assert len(prompter.select_calls) == 1
        assert prompter.confirm_calls == []
        client.set_default.assert_not_called()
        client.remove.assert_not_called()

    def test_declined_confirmation_makes_no_change(
        self, operation: str, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", "b", default="a")
        prompter = prompter_factory(confirm=False)

        result = getattr(_resolver(client, prompter), operation)(
            ["b"], prompt_message=_message,
        )

        assert result.resolution is Resolution.DECLINED
        assert result.card_id == "b"
        client.set_default.assert_not_called()
        client.remove.assert_not_called()

    def test_explicit_id_skips_picker(
        self, operation: str, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", "b", default="a")
        prompter = prompter_factory()

        result = getattr(_resolver(client, prompter), operation)(
            ["b"], prompt_message=_message,
        )

        assert result.resolution is Resolution.APPLIED
        assert prompter.select_calls == []
        assert result.card is not None
        assert result.card.id == "b"

    def test_fetch_failure_raises_card_fetch_error(
        self, operation: str, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.side_effect = ApiError("Not authorized", status_code=403)

        with pytest.raises(CardFetchError, match="Not authorized") as exc_info:
            getattr(_resolver(client, prompter_factory()), operation)(
                [], prompt_message=_message,
            )
        assert exc_info.value.status_code == 403
        assert not isinstance(exc_info.value, DefaultCardRefreshError)

    def test_prompt_message_built_lazily(
        self, operation: str, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload()
        message = MagicMock(return_value="msg")

        getattr(_resolver(client, prompter_factory()), operation)(
            [], prompt_message=message,
        )
        message.assert_not_called()


# ---------------------------------------------------------------------------
# set-default
# ---------------------------------------------------------------------------

class TestSetDefault:
    def test_selected_card_becomes_default(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", "b", default="a")
        prompter = prompter_factory(selection="b")

        result = _resolver(client, prompter).set_default([], prompt_message=_message)

        assert result.resolution is Resolution.APPLIED
        client.set_default.assert_called_once_with("b")
        assert prompter.confirm_calls == [SET_DEFAULT_CONFIRMATION]

    def test_picker_gets_message_and_abort_at_end(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", "b", default="a")
        prompter = prompter_factory(selection="b")

        _resolver(client, prompter).set_default([], prompt_message=_message)

        message, choices, abort_position = prompter.select_calls[0]
        assert message == "Pick a card"
        assert [choice.value for choice in choices] == ["a", "b"]
        assert abort_position == "end"

    def test_unknown_explicit_id_still_mutates(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", default="a")

        result = _resolver(client, prompter_factory()).set_default(
            ["zzz"], prompt_message=_message,
        )

        client.set_default.assert_called_once_with("zzz")
        assert result.resolution is Resolution.APPLIED
        assert result.card is None
        assert result.card_id == "zzz"

    def test_api_rejection_propagates(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", default="a")
        client.set_default.side_effect = ApiError("Card not found", status_code=404)

        with pytest.raises(ApiError, match="Card not found"):
            _resolver(client, prompter_factory()).set_default(
                ["zzz"], prompt_message=_message,
            )

    def test_empty_string_selection_counts_as_no_selection(
        self, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a")

        result = _resolver(client, prompter_factory()).set_default(
            [""], prompt_message=_message,
        )

        assert result.resolution is Resolution.NO_SELECTION
        client.set_default.assert_not_called()


# ---------------------------------------------------------------------------
# remove
# ---------------------------------------------------------------------------

class TestRemove:
    def test_picker_abort_at_start(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", "b")
        prompter = prompter_factory(selection="b")

        _resolver(client, prompter).remove([], prompt_message=_message)

        assert prompter.select_calls[0][2] == "start"
        assert prompter.confirm_calls == [REMOVE_CONFIRMATION]

    def test_non_default_removal_does_not_refetch(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", "b", default="a")

        result = _resolver(client, prompter_factory()).remove(
            ["b"], prompt_message=_message,
        )

        client.remove.assert_called_once_with("b")
        assert client.list_cards.call_count == 1
        assert result.was_default is False
        assert result.remaining == 1
        assert result.new_default is None

    def test_default_removal_with_remaining_cards_refetches_once(
        self, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.side_effect = [
            _payload("a", "b", "c", default="a"),
            _payload("b", "c", default="c"),
        ]

        result = _resolver(client, prompter_factory()).remove(
            ["a"], prompt_message=_message,
        )

        client.remove.assert_called_once_with("a")
        assert client.list_cards.call_count == 2
        assert result.was_default is True
        assert result.remaining == 2
        assert result.new_default is not None
        assert result.new_default.id == "c"

    def test_removing_last_default_card_skips_refetch(
        self, prompter_factory: Any,
    ) -> None:
        client = MagicMock()
        client.list_cards.return_value = {
            "cards": [{"id": "a", "brand": "Visa", "last4": "1111"}],
            "defaultCardId": "a",
        }

        result = _resolver(client, prompter_factory()).remove(
            ["a"], prompt_message=_message,
        )

        client.remove.assert_called_once_with("a")
        assert client.list_cards.call_count == 1
        assert result.resolution is Resolution.APPLIED
        assert result.was_default is True
        assert result.remaining == 0
        assert result.new_default is None

    def test_refetch_without_default_reports_none(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.side_effect = [
            _payload("a", "b", default="a"),
            _payload("b", default=None),
        ]

        result = _resolver(client, prompter_factory()).remove(
            ["a"], prompt_message=_message,
        )

        assert result.was_default is True
        assert result.new_default is None

    def test_unknown_explicit_id_still_mutates(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.return_value = _payload("a", default="a")

        result = _resolver(client, prompter_factory()).remove(
            ["zzz"], prompt_message=_message,
        )

        client.remove.assert_called_once_with("zzz")
        assert result.card is None
        assert result.was_default is False
        assert result.remaining == 1

    def test_refetch_failure_raises_after_removal(self, prompter_factory: Any) -> None:
        client = MagicMock()
        client.list_cards.side_effect = [
            _payload("a", "b", default="a"),
            ApiError("Service unavailable", status_code=503),
        ]

        with pytest.raises(DefaultCardRefreshError, match="Service unavailable") as exc_info:
            _resolver(client, prompter_factory()).remove(["a"], prompt_message=_message)

        client.remove.assert_called_once_with("a")
        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.__cause__, CardFetchError)
