# src/fxconv/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and domain errors.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class InvalidRateError(DomainError):
    """Raised when a rate value is invalid (e.g., negative or zero)."""
    pass


class ProviderUnavailableError(DomainError):
    """Raised when the rate provider cannot deliver a usable rate table."""
    pass


class RatesUnavailableError(DomainError):
    """Raised when no rate is loaded for a requested currency."""

    def __init__(self, from_currency: str, to_currency: str):
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(
            f"Exchange rates are not available for {from_currency} or {to_currency}"
        )


class UnknownCurrencyError(DomainError):
    """Raised when a currency code is not among the selectable currencies."""
    pass


class MissingCredentialError(DomainError):
    """Raised when no API key is available to talk to the rate provider."""
    pass
