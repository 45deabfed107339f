"""Command-line entry point: global options and the command groups."""

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.principal import Principal, Role
from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.category_commands import (
    category_add,
    category_delete,
    category_list,
    category_show,
    category_update,
)
from storefront.infrastructure.cli.context import CliState
from storefront.infrastructure.cli.order_commands import (
    order_list,
    order_mine,
    order_place,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.payment_commands import payment_config
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_show,
    product_update,
)
from storefront.infrastructure.logging_config import get_logger, setup_logging

log = get_logger(__name__)


@click.group()
@click.option("--json", "as_json", is_flag=True, default=False, help="Machine-readable output.")
@click.option("--user-id", envvar="STOREFRONT_USER_ID", default=None, help="Authenticated user id.")
@click.option(
    "--role", envvar="STOREFRONT_ROLE", default="customer", show_default=True,
    type=click.Choice([r.value for r in Role]), help="Role of the authenticated user.",
)
@click.pass_context
def cli(ctx: click.Context, as_json: bool, user_id: str | None, role: str) -> None:
    """Storefront — Inventory and Order Service"""
    config = settings()
    setup_logging(config.log_level, config.log_file)

    try:
        principal = Principal(id=user_id, role=Role.parse(role)) if user_id else None
    except DomainException as exc:
        raise click.BadParameter(str(exc), param_hint="--role")
    log.debug("Acting as %s", principal)
    ctx.obj = CliState(principal=principal, as_json=as_json)


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def order() -> None:
    """Place and manage orders."""


@cli.group()
def category() -> None:
    """Manage categories."""


@cli.group()
def payment() -> None:
    """Payment provider settings."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
order.add_command(order_list)
order.add_command(order_mine)
order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_status)
category.add_command(category_add)
category.add_command(category_delete)
category.add_command(category_list)
category.add_command(category_show)
category.add_command(category_update)
payment.add_command(payment_config)
