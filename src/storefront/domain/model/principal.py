"""Authenticated identity as handed to the core by the auth layer.

Token issuance and verification live outside the core; use cases only see
an optional ``Principal`` and check it once, at their top.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import BadRequest, Forbidden, Unauthorized


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"

    @staticmethod
    def parse(raw: str) -> Role:
        try:
            return Role(raw)
        except ValueError:
            raise BadRequest(f"invalid role: {raw!r}") from None


@dataclass(frozen=True)
class Principal:
    id: str
    role: Role = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def require_identity(principal: Principal | None) -> Principal:
    if principal is None:
        raise Unauthorized("authentication required")
    return principal


def require_role(principal: Principal | None, role: Role) -> Principal:
    principal = require_identity(principal)
    if principal.role != role:
        raise Forbidden(f"{role.value} role required")
    return principal
