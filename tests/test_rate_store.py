# tests/test_rate_store.py
"""
Rate Store Tests - Unit Tests for Refresh and Conversion

This module contains unit tests for RateStore: conversion arithmetic,
the "rates unavailable" condition, refresh success and failure handling,
currency listing, and the update-time sentinels.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxconv.application.rate_store (RateStore for testing)
- fxconv.adapters.providers.base (RateProvider for fake providers)
- fxconv.domain (RateTable, errors)
- unittest.mock (Mock for provider mocking)
- pytest (testing framework)
"""
import asyncio
import itertools

import pytest  # Testing framework for writing and running tests

from unittest.mock import Mock  # Mock objects for testing without real providers

from fxconv.adapters.providers.base import RateProvider
from fxconv.application.rate_store import RateStore
from fxconv.domain.errors import ProviderUnavailableError, RatesUnavailableError
from fxconv.domain.models import RateTable


def _table(rates=None, last="Mon, 01 Jan 2024 00:00:01 +0000", nxt="Tue, 02 Jan 2024 00:00:01 +0000"):
    return RateTable(
        base="USD",
        rates=rates if rates is not None else {"USD": 1.0, "EUR": 0.9, "JPY": 150.0},
        last_updated=last,
        next_update=nxt,
    )


class StaticProvider(RateProvider):
    """Returns a fixed table, or raises the given error."""

    def __init__(self, table=None, error=None):
        self.table = table
        self.error = error
        self.calls = []

    def latest(self, base):
        self.calls.append(base)
        if self.error is not None:
            raise self.error
        return self.table


@pytest.fixture
def store():
    return RateStore(StaticProvider(_table()))


@pytest.fixture
def empty_store():
    return RateStore(StaticProvider(error=ProviderUnavailableError("down")))


class TestConvert:
    def test_scenario_usd_to_eur(self, store):
        assert store.convert(100, "USD", "EUR") == pytest.approx(90.0)

    def test_scenario_eur_to_usd(self, store):
        assert store.convert(100, "EUR", "USD") == pytest.approx(111.111111, rel=1e-6)

    def test_cross_rate_between_non_reference_currencies(self, store):
        assert store.convert(9, "EUR", "JPY") == pytest.approx(1500.0)

    def test_no_rounding(self, store):
        assert store.convert(1, "JPY", "EUR") == pytest.approx(0.9 / 150.0)

    def test_unknown_currency(self, store):
        with pytest.raises(RatesUnavailableError) as exc_info:
            store.convert(10, "XXX", "USD")
        assert exc_info.value.from_currency == "XXX"
        assert exc_info.value.to_currency == "USD"

    def test_unknown_target_currency(self, store):
        with pytest.raises(RatesUnavailableError):
            store.convert(10, "USD", "XXX")

    def test_unavailable_is_not_an_arithmetic_or_value_error(self, store):
        with pytest.raises(RatesUnavailableError) as exc_info:
            store.convert(1, "USD", "XXX")
        assert not isinstance(exc_info.value, (ValueError, ArithmeticError))

    @pytest.mark.parametrize("pair", [("USD", "EUR"), ("EUR", "EUR"), ("", ""), ("XXX", "YYY")])
    def test_unrefreshed_store_is_unavailable(self, empty_store, pair):
        with pytest.raises(RatesUnavailableError):
            empty_store.convert(1.0, *pair)

    @pytest.mark.parametrize("amount", [0.01, 1.0, 42.5, 1e6])
    def test_identity(self, store, amount):
        for code in store.list_currencies():
            assert store.convert(amount, code, code) == pytest.approx(amount)

    @pytest.mark.parametrize("amount", [0.5, 3.0, 1234.56])
    def test_inverse_consistency(self, store, amount):
        for a, b in itertools.permutations(store.list_currencies(), 2):
            assert store.convert(amount, a, b) == pytest.approx(1 / store.convert(1 / amount, b, a))


class TestRefresh:
    def test_initial_refresh_on_construction(self):
        provider = StaticProvider(_table())
        store = RateStore(provider, reference_currency="usd")
        assert provider.calls == ["USD"]
        assert store.has_rates

    def test_no_refresh_when_disabled(self):
        provider = StaticProvider(_table())
        store = RateStore(provider, refresh_on_init=False)
        assert provider.calls == []
        assert not store.has_rates

    def test_refresh_replaces_table_wholesale(self, store):
        store.provider = StaticProvider(_table({"USD": 1.0, "GBP": 0.8}, last="later", nxt="much later"))

        assert store.refresh() is True
        assert store.list_currencies() == ["GBP", "USD"]
        assert store.last_updated() == "later"
        assert store.next_update() == "much later"
        with pytest.raises(RatesUnavailableError):
            store.convert(1, "USD", "EUR")

    @pytest.mark.parametrize("error", [
        ProviderUnavailableError("HTTP 500"),
        RuntimeError("unexpected"),
        ValueError("bad"),
    ])
    def test_failed_refresh_keeps_previous_table(self, store, error):
        before = store.table
        store.provider = StaticProvider(error=error)

        assert store.refresh() is False
        assert store.table is before
        assert store.last_updated() == "Mon, 01 Jan 2024 00:00:01 +0000"
        assert store.next_update() == "Tue, 02 Jan 2024 00:00:01 +0000"
        assert store.convert(100, "USD", "EUR") == pytest.approx(90.0)

    def test_empty_table_counts_as_failure(self, store):
        before = store.table
        store.provider = StaticProvider(_table({}))

        assert store.refresh() is False
        assert store.table is before

    def test_initial_refresh_failure_does_not_raise(self, empty_store):
        assert not empty_store.has_rates

    def test_refresh_async(self, empty_store):
        empty_store.set_provider(StaticProvider(_table()))

        assert asyncio.run(empty_store.refresh_async()) is True
        assert empty_store.has_rates

    def test_set_provider_keeps_table(self, store):
        before = store.table
        new_provider = Mock(spec=RateProvider)
        store.set_provider(new_provider)

        assert store.provider is new_provider
        assert store.table is before
        new_provider.latest.assert_not_called()


class TestListingAndTimes:
    def test_list_currencies_sorted(self, store):
        assert store.list_currencies() == ["EUR", "JPY", "USD"]

    def test_list_currencies_unique_and_ascending(self):
        store = RateStore(StaticProvider(_table({"ZAR": 18.0, "AUD": 1.5, "usd": 1.0, "USD": 1.0})))
        codes = store.list_currencies()
        assert codes == sorted(codes)
        assert len(codes) == len(set(codes))

    def test_list_currencies_empty_before_refresh(self, empty_store):
        assert empty_store.list_currencies() == []

    def test_times_not_available_before_refresh(self, empty_store):
        assert empty_store.last_updated() == "N/A"
        assert empty_store.next_update() == "N/A"

    def test_blank_times_use_sentinel(self):
        store = RateStore(StaticProvider(_table(last="", nxt="")))
        assert store.last_updated() == "N/A"
        assert store.next_update() == "N/A"
