# tests/test_handlers.py
"""
Telegram Handler Tests - Command and Button Behavior

This module drives the Telegram handlers with mocked updates and contexts:
owner restriction, amount validation, conversion replies, selection
commands, refresh, favorites, and API key replacement.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxconv.adapters.telegram.handlers (handler coroutines for testing)
- fxconv.application (Preferences, RateStore)
- unittest.mock (Mock, AsyncMock, patch)
- pytest (testing framework)
"""
import asyncio
from types import SimpleNamespace

import pytest  # Testing framework for writing and running tests

from unittest.mock import AsyncMock, Mock, patch  # Mocks for Telegram objects

from fxconv.adapters.telegram import handlers
from fxconv.application.preferences import Preferences
from fxconv.application.rate_store import RateStore
from fxconv.domain.errors import ProviderUnavailableError
from fxconv.domain.models import RateTable
from fxconv.shared.rate_limiter import RateLimiter


RATES = {"USD": 1.0, "EUR": 0.9, "JPY": 150.0}


@pytest.fixture(autouse=True)
def fresh_rate_limiter():
    with patch.object(handlers, "rate_limiter", RateLimiter()):
        yield


@pytest.fixture
def store():
    provider = Mock()
    provider.latest.return_value = RateTable(base="USD", rates=RATES, last_updated="L", next_update="N")
    return RateStore(provider)


@pytest.fixture
def prefs(tmp_path):
    return Preferences(path=tmp_path / "prefs.json")


@pytest.fixture
def context(store, prefs):
    return SimpleNamespace(
        application=SimpleNamespace(bot_data={
            "store": store,
            "preferences": prefs,
            "owner_username": "@Owner",
        }),
        chat_data={},
        args=[],
        bot=SimpleNamespace(send_message=AsyncMock()),
    )


def make_update(username="owner", text=None, data=None):
    message = SimpleNamespace(text=text, reply_text=AsyncMock(), delete=AsyncMock())
    query = SimpleNamespace(data=data, answer=AsyncMock()) if data else None
    return SimpleNamespace(
        effective_user=SimpleNamespace(id=7, username=username),
        effective_chat=SimpleNamespace(id=99),
        effective_message=message,
        callback_query=query,
    )


def replies(update):
    return [c.args[0] for c in update.effective_message.reply_text.await_args_list]


def run(coro):
    return asyncio.run(coro)


class TestOwnerGuard:
    def test_non_owner_is_refused(self, context):
        update = make_update(username="stranger", text="100")
        run(handlers.amount_message(update, context))
        assert replies(update) == ["⚠️ This converter is private."]
        assert context.chat_data == {}

    def test_owner_match_is_case_insensitive(self, context):
        update = make_update(username="OWNER", text="100")
        run(handlers.amount_message(update, context))
        assert replies(update) == ["100 EUR = 100 EUR"]

    def test_no_owner_configured_refuses_everyone(self, context):
        context.application.bot_data["owner_username"] = ""
        update = make_update(text="100")
        run(handlers.start(update, context))
        assert replies(update) == ["⚠️ This converter is private."]


class TestConversion:
    def test_amount_message_converts(self, context):
        context.args = ["usd"]
        run(handlers.from_cmd(make_update(), context))

        update = make_update(text="100")
        run(handlers.amount_message(update, context))

        assert replies(update) == ["100 USD = 90 EUR"]

    def test_invalid_amount_never_reaches_store(self, context, store):
        with patch.object(store, "convert") as convert:
            update = make_update(text="ten dollars")
            run(handlers.amount_message(update, context))

        convert.assert_not_called()
        assert replies(update) == ["Please enter a valid number"]

    def test_convert_command_with_codes(self, context):
        context.args = ["100", "eur", "usd"]
        update = make_update()
        run(handlers.convert_cmd(update, context))
        assert replies(update) == ["100 EUR = 111.11 USD"]

    def test_convert_command_unknown_code(self, context):
        context.args = ["100", "XXX"]
        update = make_update()
        run(handlers.convert_cmd(update, context))
        assert replies(update)[0].startswith("Unknown currency")

    def test_convert_without_rates(self, context, store):
        store._table = None
        context.args = ["5"]
        update = make_update()
        run(handlers.convert_cmd(update, context))
        assert replies(update)[0].startswith("Conversion error:")

    def test_overflowing_result_is_reported(self, context):
        context.args = ["1e308", "USD", "JPY"]
        update = make_update()
        run(handlers.convert_cmd(update, context))
        assert replies(update) == ["Amount is too large to convert"]


class TestActions:
    def test_swap_button(self, context):
        context.args = ["JPY"]
        run(handlers.to_cmd(make_update(), context))

        update = make_update(data=handlers.ACTION_SWAP)
        run(handlers.action_callback(update, context))

        session = context.chat_data["session"]
        assert (session.from_currency, session.to_currency) == ("JPY", "EUR")
        update.callback_query.answer.assert_awaited_once()

    def test_convert_button_reuses_last_amount(self, context):
        run(handlers.amount_message(make_update(text="10"), context))
        context.args = ["JPY"]
        run(handlers.to_cmd(make_update(), context))

        update = make_update(data=handlers.ACTION_CONVERT)
        run(handlers.action_callback(update, context))

        assert replies(update) == ["10 EUR = 1666.67 JPY"]

    def test_favorite_button_twice(self, context, prefs):
        first = make_update(data=handlers.ACTION_FAVORITE)
        second = make_update(data=handlers.ACTION_FAVORITE)
        run(handlers.action_callback(first, context))
        run(handlers.action_callback(second, context))

        assert replies(first) == ["EUR added to favorites"]
        assert replies(second) == ["EUR is already in favorites"]
        assert prefs.favorites == ["EUR"]

    def test_setdefault_command(self, context, prefs):
        update = make_update()
        run(handlers.setdefault_cmd(update, context))
        assert replies(update) == ["EUR set as default 'from' currency"]
        assert Preferences.load(prefs.path).default_currency == "EUR"

    def test_refresh_success_and_failure(self, context, store):
        ok = make_update()
        run(handlers.refresh_cmd(ok, context))
        assert replies(ok)[0].startswith("✅ Rates updated successfully")

        store.provider.latest.side_effect = ProviderUnavailableError("down")
        failed = make_update()
        run(handlers.refresh_cmd(failed, context))
        assert replies(failed)[0].startswith("❌ Failed to update rates")
        assert store.list_currencies() == ["EUR", "JPY", "USD"]

    def test_refresh_is_throttled(self, context, store):
        for _ in range(3):
            run(handlers.refresh_cmd(make_update(), context))

        update = make_update()
        run(handlers.refresh_cmd(update, context))

        assert replies(update)[0].startswith("⏰ Rates were refreshed recently")
        assert store.provider.latest.call_count == 4  # initial refresh + 3


class TestApiKey:
    @patch.object(handlers, "ExchangeRateAPIProvider")
    def test_new_key_saved_after_successful_refresh(self, mock_provider_class, context, prefs):
        mock_provider_class.return_value.latest.return_value = RateTable(base="USD", rates=RATES)
        context.args = ["newkey1234567"]
        update = make_update()

        run(handlers.apikey_cmd(update, context))

        update.effective_message.delete.assert_awaited_once()
        mock_provider_class.assert_called_once_with(api_key="newkey1234567")
        assert Preferences.load(prefs.path).credential == "newkey1234567"
        text = context.bot.send_message.await_args.kwargs["text"]
        assert text.startswith("✅ API key saved")

    @patch.object(handlers, "ExchangeRateAPIProvider")
    def test_rejected_key_restores_previous_provider(self, mock_provider_class, context, store, prefs):
        previous = store.provider
        mock_provider_class.return_value.latest.side_effect = ProviderUnavailableError("invalid-key")
        context.args = ["badkey1234567"]

        run(handlers.apikey_cmd(make_update(), context))

        assert store.provider is previous
        assert prefs.credential == ""
        assert not prefs.path.exists()

    def test_malformed_key(self, context, store):
        previous = store.provider
        context.args = ["bad key"]

        run(handlers.apikey_cmd(make_update(), context))

        assert store.provider is previous
        assert context.bot.send_message.await_args.kwargs["text"].startswith("Usage: /apikey")


class TestBuildHandlers:
    def test_registers_all_commands(self):
        commands = set()
        for h in handlers.build_handlers():
            commands |= set(getattr(h, "commands", ()))
        assert {"start", "convert", "from", "to", "swap", "refresh",
                "setdefault", "favorite", "currencies", "apikey"} <= commands
