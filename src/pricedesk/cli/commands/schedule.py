"""Payment schedule commands."""

import click

from pricedesk.cli.error_handling import handle_domain_error
from pricedesk.cli.pricing_inputs import build_session_or_exit, pricing_options
from pricedesk.domain.schedule import write_schedule_csv
from pricedesk.utils.date_parser import parse_date


@click.command("schedule")
@pricing_options
@click.option("--start-date", default="today", show_default=True, help="Due date of the first installment")
@click.option("--first-cheque", type=int, default=1000, show_default=True, help="First cheque number")
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the schedule, with amounts in words, to a CSV file",
)
@click.pass_context
def show_schedule(
    ctx,
    price: str,
    months: int,
    deposit: str | None,
    tracks: tuple[str, ...],
    overrides: tuple[str, ...],
    expenses: tuple[str, ...],
    start_date: str,
    first_cheque: int,
    csv_path: str | None,
):
    """Seed a dated payment schedule for a unit.

    Examples:
        pricedesk schedule 1000000 --months 24 --start-date 2025-01-01
        pricedesk schedule 1000000 -m 24 --track annual --csv schedule.csv
    """
    try:
        start = parse_date(start_date)
    except ValueError as e:
        click.echo(f"Error: Invalid start date: {e}", err=True)
        ctx.exit(1)

    session = build_session_or_exit(
        ctx,
        price=price,
        months=months,
        deposit=deposit,
        tracks=tracks,
        overrides=overrides,
        expenses=expenses,
    )
    rows = session.schedule(start, first_cheque_number=first_cheque)

    if not rows:
        click.echo("No installments to schedule.")
        return

    if csv_path:
        try:
            with open(csv_path, "w", newline="", encoding="utf-8-sig") as f:
                written = write_schedule_csv(rows, f)
        except OSError as e:
            handle_domain_error(ctx, ValueError(f"Could not write '{csv_path}': {e}"))
        click.echo(f"Wrote {written} installments to {csv_path}")
        return

    click.echo(f"\nSchedule ({len(rows)} installments):")
    click.echo("-" * 60)
    for row in rows:
        click.echo(
            f"{row.due_date.isoformat()} | {row.track.name.title():10s} | "
            f"{row.cheque_number:8s} | {row.amount:>15,.2f}"
        )
    click.echo("-" * 60)
    total = sum(row.amount for row in rows)
    click.echo(f"Total installments: {total:,.2f}")


def register_commands(cli):
    """Register schedule command with main CLI."""
    cli.add_command(show_schedule)
