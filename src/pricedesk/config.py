"""Project pricing configuration.

Each setting is resolved from an explicit argument first, then from its
environment variable, then from a built-in default.
"""

import os
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from pricedesk.domain.entities import AdditionalExpense, ProjectTerms, Track, TRACK_ORDER

CASH_FACTOR_ENV = "PRICEDESK_CASH_FACTOR"
REDUCTION_FACTOR_ENV = "PRICEDESK_REDUCTION_FACTOR"
DEPOSIT_PERCENTAGE_ENV = "PRICEDESK_DEPOSIT_PERCENTAGE"
ANNUAL_PERCENTAGE_ENV = "PRICEDESK_ANNUAL_PERCENTAGE"
QUARTERLY_PERCENTAGE_ENV = "PRICEDESK_QUARTERLY_PERCENTAGE"
LOG_LEVEL_ENV = "PRICEDESK_LOG_LEVEL"

DEFAULT_CASH_FACTOR = Decimal("1")
DEFAULT_REDUCTION_FACTOR = Decimal("0.01")
DEFAULT_DEPOSIT_PERCENTAGE = Decimal("10")
DEFAULT_ANNUAL_PERCENTAGE = Decimal("0.05")
DEFAULT_QUARTERLY_PERCENTAGE = Decimal("0.02")


def _resolve(value: Optional[Decimal], env_name: str, default: Decimal) -> Decimal:
    if value is not None:
        return Decimal(value)
    raw = os.environ.get(env_name)
    if raw is None or not raw.strip():
        return default
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        raise ValueError(f"{env_name} must be a number (got '{raw}')") from None


def load_project_terms(
    cash_factor: Optional[Decimal] = None,
    reduction_factor: Optional[Decimal] = None,
    deposit_percentage: Optional[Decimal] = None,
    annual_percentage: Optional[Decimal] = None,
    quarterly_percentage: Optional[Decimal] = None,
    installment_options: Optional[Iterable[Track]] = None,
    additional_expenses: Iterable[AdditionalExpense] = (),
) -> ProjectTerms:
    """Build project terms from arguments, environment and defaults.

    Args:
        cash_factor: List price to cash-equivalent multiplier
        reduction_factor: Periodic rate used by the annuity formula
        deposit_percentage: Suggested deposit as a percentage of the price
        annual_percentage: Default annual installment as a fraction of the price
        quarterly_percentage: Default quarterly installment as a fraction of the price
        installment_options: Tracks the project offers (all by default)
        additional_expenses: Project expenses charged on top of the final price

    Returns:
        ProjectTerms instance

    Raises:
        ValueError: If an environment variable is not a number
    """
    track_percentages = {
        Track.ANNUAL: _resolve(annual_percentage, ANNUAL_PERCENTAGE_ENV, DEFAULT_ANNUAL_PERCENTAGE),
        Track.QUARTERLY: _resolve(
            quarterly_percentage, QUARTERLY_PERCENTAGE_ENV, DEFAULT_QUARTERLY_PERCENTAGE
        ),
    }
    options = frozenset(installment_options) if installment_options is not None else frozenset(TRACK_ORDER)

    return ProjectTerms(
        cash_factor=_resolve(cash_factor, CASH_FACTOR_ENV, DEFAULT_CASH_FACTOR),
        reduction_factor=_resolve(reduction_factor, REDUCTION_FACTOR_ENV, DEFAULT_REDUCTION_FACTOR),
        deposit_percentage=_resolve(
            deposit_percentage, DEPOSIT_PERCENTAGE_ENV, DEFAULT_DEPOSIT_PERCENTAGE
        ),
        track_percentages=track_percentages,
        installment_options=options,
        additional_expenses=tuple(additional_expenses),
    )
