"""Main CLI entry point."""

import click

from pricedesk.config import (
    ANNUAL_PERCENTAGE_ENV,
    CASH_FACTOR_ENV,
    DEPOSIT_PERCENTAGE_ENV,
    LOG_LEVEL_ENV,
    QUARTERLY_PERCENTAGE_ENV,
    REDUCTION_FACTOR_ENV,
    load_project_terms,
)
from pricedesk.observability import setup_logging
from pricedesk.utils.amount_parser import parse_amount

# Import and register all commands at module level
from pricedesk.cli.commands import quote, schedule, words


@click.group()
@click.option("--cash-factor", envvar=CASH_FACTOR_ENV, help="List price to cash-equivalent multiplier")
@click.option("--reduction-factor", envvar=REDUCTION_FACTOR_ENV, help="Periodic rate used for amortization")
@click.option("--deposit-percentage", envvar=DEPOSIT_PERCENTAGE_ENV, help="Default deposit as a percentage of the price")
@click.option("--annual-percentage", envvar=ANNUAL_PERCENTAGE_ENV, help="Default annual installment as a fraction of the price")
@click.option("--quarterly-percentage", envvar=QUARTERLY_PERCENTAGE_ENV, help="Default quarterly installment as a fraction of the price")
@click.option("--log-level", envvar=LOG_LEVEL_ENV, default="WARNING", show_default=True, help="Log level")
@click.pass_context
def cli(
    ctx,
    cash_factor: str | None,
    reduction_factor: str | None,
    deposit_percentage: str | None,
    annual_percentage: str | None,
    quarterly_percentage: str | None,
    log_level: str,
):
    """Pricedesk - installment pricing for real-estate units.

    Computes deposit, annual, quarterly and monthly installments for a unit
    and renders amounts in Arabic words for contracts.
    """
    ctx.ensure_object(dict)

    if ctx.invoked_subcommand is not None:
        setup_logging(log_level)
        try:
            ctx.obj["terms"] = load_project_terms(
                cash_factor=_decimal_option("--cash-factor", cash_factor),
                reduction_factor=_decimal_option("--reduction-factor", reduction_factor),
                deposit_percentage=_decimal_option("--deposit-percentage", deposit_percentage),
                annual_percentage=_decimal_option("--annual-percentage", annual_percentage),
                quarterly_percentage=_decimal_option("--quarterly-percentage", quarterly_percentage),
            )
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


def _decimal_option(name: str, value: str | None):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError:
        raise ValueError(f"{name} must be a number (got '{value}')") from None


# Register all commands
quote.register_commands(cli)
schedule.register_commands(cli)
words.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
