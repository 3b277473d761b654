"""CLI error handling helpers."""

import click

from pricedesk.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def warn_degenerate(error: DomainError) -> None:
    """Render a schedule warning without stopping the command."""
    click.echo(f"Warning: {error}", err=True)
