"""Per-invocation CLI state and the shared error/output plumbing."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import asdict, dataclass, is_dataclass

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.principal import Principal


@dataclass(frozen=True)
class CliState:
    principal: Principal | None
    as_json: bool


def state() -> CliState:
    return click.get_current_context().find_object(CliState) or CliState(None, False)


@contextmanager
def domain_errors():
    """Render a DomainException as a CLI failure (exit code 1)."""
    try:
        yield
    except DomainException as exc:
        if state().as_json:
            click.echo(json.dumps(exc.to_dict()))
            raise click.exceptions.Exit(1) from exc
        raise click.ClickException(f"{exc.kind}: {exc}") from exc


def emit_json(result) -> None:
    if is_dataclass(result):
        result = asdict(result)
    elif isinstance(result, list):
        result = [asdict(r) if is_dataclass(r) else r for r in result]
    click.echo(json.dumps(result, indent=2, default=str))
