"""Shared pytest fixtures for pricedesk tests."""

import logging
from decimal import Decimal

import pytest

from pricedesk.domain.entities import (
    AdditionalExpense,
    ExpenseKind,
    PricingInputs,
    ProjectTerms,
    Track,
    TRACK_ORDER,
)

ENV_VARS = [
    "PRICEDESK_CASH_FACTOR",
    "PRICEDESK_REDUCTION_FACTOR",
    "PRICEDESK_DEPOSIT_PERCENTAGE",
    "PRICEDESK_ANNUAL_PERCENTAGE",
    "PRICEDESK_QUARTERLY_PERCENTAGE",
    "PRICEDESK_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment settings out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def track_percentages():
    return {Track.ANNUAL: Decimal("0.05"), Track.QUARTERLY: Decimal("0.02")}


@pytest.fixture
def terms(track_percentages):
    """Project terms matching the reference scenario."""
    return ProjectTerms(
        cash_factor=Decimal("1.0"),
        reduction_factor=Decimal("0.01"),
        deposit_percentage=Decimal("10"),
        track_percentages=track_percentages,
        installment_options=frozenset(TRACK_ORDER),
    )


@pytest.fixture
def terms_with_expenses(terms):
    """Project terms carrying one active and one inactive expense."""
    from dataclasses import replace

    return replace(
        terms,
        additional_expenses=(
            AdditionalExpense(name="Maintenance", kind=ExpenseKind.PERCENTAGE, value=Decimal("5")),
            AdditionalExpense(name="Club", kind=ExpenseKind.FIXED_VALUE, value=Decimal("20000")),
            AdditionalExpense(
                name="Parking", kind=ExpenseKind.FIXED_VALUE, value=Decimal("75000"), is_active=False
            ),
        ),
    )


@pytest.fixture
def base_inputs(track_percentages):
    """1,000,000 unit, 10% deposit, 24 months, no fixed tracks."""
    return PricingInputs(
        unit_price=Decimal("1000000"),
        deposit_amount=Decimal("100000"),
        horizon_months=24,
        cash_factor=Decimal("1.0"),
        reduction_factor=Decimal("0.01"),
        active_tracks=frozenset(),
        overrides={},
        track_percentages=track_percentages,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
