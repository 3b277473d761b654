"""Amount-in-words conversion commands."""

import click

from pricedesk.cli.error_handling import handle_domain_error
from pricedesk.domain.errors import DomainError
from pricedesk.domain.numerals import to_number, to_words
from pricedesk.utils.amount_parser import parse_amount


@click.command("words")
@click.argument("amount")
@click.option("--suffix", is_flag=True, help='Append the legal closing phrase "فقط لا غير"')
@click.pass_context
def amount_to_words(ctx, amount: str, suffix: bool):
    """Print AMOUNT in Arabic words.

    Examples:
        pricedesk words 1250000
        pricedesk words 1999.50 --suffix
    """
    try:
        click.echo(to_words(parse_amount(amount), suffix=suffix))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@click.command("number")
@click.argument("words", nargs=-1, required=True)
@click.pass_context
def words_to_number(ctx, words: tuple[str, ...]):
    """Parse Arabic amount words back into a number.

    Examples:
        pricedesk number "ألف و مائتان جنيه"
    """
    text = " ".join(words)
    value = to_number(text)
    if value is None:
        click.echo(f"Error: Could not parse '{text}'", err=True)
        ctx.exit(1)
    click.echo(f"{value:.2f}")


def register_commands(cli):
    """Register conversion commands with main CLI."""
    cli.add_command(amount_to_words)
    cli.add_command(words_to_number)
