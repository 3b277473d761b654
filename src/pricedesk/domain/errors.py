"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class InvalidInputError(DomainError):
    """Pricing inputs rejected before any computation takes place."""


class DegenerateScheduleError(DomainError):
    """Selected tracks leave no valid room for the monthly residual."""


class NumeralParseError(DomainError):
    """Text is not a canonical amount-in-words expression."""


def negative_value(field: str, value) -> str:
    """Return message for a value that must not be negative."""
    return f"{field} must not be negative (got {value})"


def deposit_not_below_price(deposit: Decimal, unit_price: Decimal) -> str:
    """Return message when the deposit does not leave anything to finance."""
    return f"Deposit {deposit} must be less than the unit price {unit_price}"


def track_not_offered(track_name: str) -> str:
    """Return message for a track the project does not offer."""
    return f"Installment track '{track_name}' is not offered by this project"


def monthly_not_overridable() -> str:
    """Return message for an attempt to override the balancing track."""
    return "The monthly track is the residual and cannot be overridden"


def tracks_exceed_horizon(horizon_months: int, fixed_count: int) -> str:
    """Return message when annual and quarterly counts swallow the horizon."""
    return (
        f"Selected tracks need {fixed_count} installments but the horizon is "
        f"only {horizon_months} months. Increase the horizon or deselect a track."
    )


def overrides_exceed_total(fixed_total: Decimal, total_repayment: Decimal) -> str:
    """Return message when overridden amounts exceed the amortized total."""
    return (
        f"Annual and quarterly installments total {fixed_total:.2f}, more than "
        f"the amortized repayment of {total_repayment:.2f}. The monthly track "
        "was set to zero."
    )


def unknown_numeral_token(token: str) -> str:
    """Return message for a word the numeral parser does not know."""
    return f"Unrecognized token '{token}'"


def not_finite(field: str, value) -> str:
    """Return message for NaN or infinite amounts."""
    return f"{field} must be a finite number (got {value})"


def nothing_to_finance(fixed_total: Decimal, financed_amount: Decimal) -> str:
    """Return message when the deposit already covers the cash price."""
    return (
        f"Nothing is left to finance (financed amount {financed_amount:.2f}), "
        f"so annual and quarterly installments of {fixed_total:.2f} cannot be "
        "scheduled. The monthly track was set to zero."
    )
