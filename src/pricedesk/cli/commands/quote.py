"""Price quote command."""

import click

from pricedesk.cli.pricing_inputs import build_session_or_exit, pricing_options


def _money(value) -> str:
    return f"{value:,.2f}"


@click.command("quote")
@pricing_options
@click.option("--words", is_flag=True, help="Also print every amount in Arabic words")
@click.pass_context
def quote_unit(
    ctx,
    price: str,
    months: int,
    deposit: str | None,
    tracks: tuple[str, ...],
    overrides: tuple[str, ...],
    expenses: tuple[str, ...],
    words: bool,
):
    """Show the installment breakdown for a unit.

    PRICE is the unit's cash price. The monthly track always absorbs what
    the annual and quarterly tracks leave over.

    Examples:
        pricedesk quote 1000000 --months 24 --deposit 100000
        pricedesk quote 1000000 -m 24 --track annual --override annual=60000
        pricedesk quote 1000000 -m 36 --track quarterly --expense "Maintenance=5%"
    """
    session = build_session_or_exit(
        ctx,
        price=price,
        months=months,
        deposit=deposit,
        tracks=tracks,
        overrides=overrides,
        expenses=expenses,
    )
    breakdown = session.breakdown
    quote = session.quote()

    click.echo(f"\nUnit price: {_money(session.inputs.unit_price)}")
    click.echo(f"Deposit: {_money(breakdown.deposit)} ({breakdown.deposit_percentage:.2f}%)")
    click.echo("-" * 60)
    for item in breakdown.tracks:
        if item.count == 0 and item.amount == 0:
            continue
        click.echo(
            f"{item.track.name.title():10s} | {item.count:3d} x {_money(item.amount):>15s} "
            f"= {_money(item.total):>16s}"
        )
    click.echo("-" * 60)
    click.echo(f"Final price: {_money(breakdown.final_price)}")

    if breakdown.overridden and breakdown.divergence != 0:
        click.echo(
            f"Overrides changed the final price by {breakdown.divergence:+,.2f} "
            f"from the amortized price of {_money(breakdown.amortized_price)}"
        )

    if quote.expenses:
        click.echo("\nAdditional expenses:")
        for line in quote.expenses:
            click.echo(f"  {line.label}: {_money(line.amount)}")
        click.echo(f"Grand total: {_money(quote.grand_total)}")

    if words:
        click.echo("")
        for line in quote.lines:
            click.echo(f"{line.label}: {line.words}")


def register_commands(cli):
    """Register quote command with main CLI."""
    cli.add_command(quote_unit)
