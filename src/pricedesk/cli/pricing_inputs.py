"""CLI helpers for turning command options into a pricing session."""

from dataclasses import replace
from decimal import Decimal

import click

from pricedesk.cli.error_handling import handle_domain_error, warn_degenerate
from pricedesk.domain.entities import AdditionalExpense, ExpenseKind, ProjectTerms, Track
from pricedesk.domain.errors import DegenerateScheduleError
from pricedesk.domain.session import PricingSession
from pricedesk.utils.amount_parser import parse_amount


def pricing_options(command):
    """Attach the options shared by every command that prices a unit."""
    decorators = [
        click.argument("price", metavar="PRICE"),
        click.option("--months", "-m", type=int, required=True, help="Repayment horizon in months"),
        click.option("--deposit", help="Deposit amount (defaults to the project deposit percentage)"),
        click.option(
            "--track",
            "tracks",
            multiple=True,
            type=click.Choice(["annual", "quarterly"], case_sensitive=False),
            help="Enable an annual or quarterly track (repeatable)",
        ),
        click.option(
            "--override",
            "overrides",
            multiple=True,
            metavar="TRACK=AMOUNT",
            help="Replace the default installment amount of an enabled track",
        ),
        click.option(
            "--expense",
            "expenses",
            multiple=True,
            metavar="NAME=VALUE[%]",
            help="Additional expense, fixed or as a percentage of the price",
        ),
    ]
    for decorator in reversed(decorators):
        command = decorator(command)
    return command


def parse_override(value: str) -> tuple[Track, Decimal]:
    """Parse a TRACK=AMOUNT option value.

    Raises:
        ValueError: If the value is malformed
    """
    name, sep, amount = value.partition("=")
    if not sep:
        raise ValueError(f"Override '{value}' must look like TRACK=AMOUNT")
    return Track.parse(name), parse_amount(amount)


def parse_expense(value: str) -> AdditionalExpense:
    """Parse a NAME=VALUE or NAME=VALUE% option value.

    Raises:
        ValueError: If the value is malformed
    """
    name, sep, raw = value.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"Expense '{value}' must look like NAME=VALUE or NAME=VALUE%")
    raw = raw.strip()
    if raw.endswith("%"):
        return AdditionalExpense(name=name, kind=ExpenseKind.PERCENTAGE, value=parse_amount(raw[:-1]))
    return AdditionalExpense(name=name, kind=ExpenseKind.FIXED_VALUE, value=parse_amount(raw))


def build_session_or_exit(
    ctx: click.Context,
    *,
    price: str,
    months: int,
    deposit: str | None,
    tracks: tuple[str, ...],
    overrides: tuple[str, ...],
    expenses: tuple[str, ...],
) -> PricingSession:
    """Create a session from CLI options, or exit with a CLI error.

    Degenerate schedules are reported as a warning; any other domain error
    stops the command.
    """
    terms: ProjectTerms = ctx.obj["terms"]
    try:
        unit_price = parse_amount(price)
        deposit_amount = parse_amount(deposit) if deposit is not None else None
        parsed_overrides = [parse_override(value) for value in overrides]
        parsed_expenses = tuple(parse_expense(value) for value in expenses)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if parsed_expenses:
        terms = replace(terms, additional_expenses=terms.additional_expenses + parsed_expenses)

    session = PricingSession(
        terms,
        unit_price=unit_price,
        deposit_amount=deposit_amount,
        horizon_months=months,
        active_tracks=[Track.parse(name) for name in tracks],
    )
    for track, amount in parsed_overrides:
        if session.error is not None and not isinstance(session.error, DegenerateScheduleError):
            break
        session.override_amount(track, amount)

    if isinstance(session.error, DegenerateScheduleError):
        warn_degenerate(session.error)
    elif session.error is not None:
        handle_domain_error(ctx, session.error)
    return session
