"""CLI commands for categories."""

from __future__ import annotations

import click

from storefront.application.manage_categories import (
    AddCategoryHandler,
    DeleteCategoryHandler,
    ListCategoriesHandler,
    ShowCategoryHandler,
    UpdateCategoryHandler,
)
from storefront.infrastructure.bootstrap import category_repository
from storefront.infrastructure.cli.context import domain_errors, emit_json, state


@click.command("list")
def category_list() -> None:
    """List all categories."""
    categories = ListCategoriesHandler(category_repository()).handle()

    if state().as_json:
        emit_json(categories)
        return
    if not categories:
        click.echo("No categories found.")
        return
    for c in categories:
        click.echo(f"{c.slug:<24} {c.name}")


@click.command("show")
@click.option("--slug", required=True)
def category_show(slug: str) -> None:
    """Show a category by slug."""
    with domain_errors():
        dto = ShowCategoryHandler(category_repository()).handle(slug)

    if state().as_json:
        emit_json(dto)
        return
    click.echo(f"{dto.name}  ({dto.slug})")
    if dto.description:
        click.echo(dto.description)


@click.command("add")
@click.option("--name", required=True)
@click.option("--description", default=None)
def category_add(name: str, description: str | None) -> None:
    """Create a category (admin)."""
    with domain_errors():
        dto = AddCategoryHandler(category_repository()).handle(state().principal, name, description)

    if state().as_json:
        emit_json(dto)
        return
    click.echo(f"Category '{dto.name}' created as {dto.slug}")


@click.command("update")
@click.option("--id", "category_id", required=True)
@click.option("--name", default=None)
@click.option("--description", default=None)
def category_update(category_id: str, name: str | None, description: str | None) -> None:
    """Rename or describe a category (admin)."""
    with domain_errors():
        dto = UpdateCategoryHandler(category_repository()).handle(
            state().principal, category_id, name=name, description=description
        )

    if state().as_json:
        emit_json(dto)
        return
    click.echo(f"Category {dto.id} is now '{dto.name}' ({dto.slug})")


@click.command("delete")
@click.option("--id", "category_id", required=True)
def category_delete(category_id: str) -> None:
    """Delete a category (admin)."""
    with domain_errors():
        DeleteCategoryHandler(category_repository()).handle(state().principal, category_id)

    if state().as_json:
        emit_json({"id": category_id, "result": "deleted"})
        return
    click.echo(f"Category {category_id} deleted.")
