"""CLI commands for payment provider configuration."""

from __future__ import annotations

import click

from storefront.application.payment_config import PaymentConfigHandler
from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.context import emit_json, state


@click.command("config")
def payment_config() -> None:
    """Show the public PayPal client id."""
    config = PaymentConfigHandler(settings().paypal_client_id).handle()

    if state().as_json:
        emit_json(config)
        return
    click.echo(f"PayPal client id: {config['clientId']}")
