"""Domain-level exceptions.

Every failure a caller can act on is a subclass of DomainException, so the
CLI layer can catch them uniformly and render one structured error shape:
``{"error": {"kind": ..., "message": ...}}``.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "error"

    def to_dict(self) -> dict:
        return {"error": {"kind": self.kind, "message": str(self)}}


class BadRequest(DomainException):
    """Malformed or semantically invalid client input."""

    kind = "bad_request"


class InsufficientStock(BadRequest):
    """A reservation asked for more units than the product has."""

    def __init__(self, product_id: str, product_name: str, requested: int, available: int) -> None:
        super().__init__(f"insufficient stock for {product_name}")
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available


class NotFound(DomainException):
    """A requested entity does not exist."""

    kind = "not_found"


class Unauthorized(DomainException):
    kind = "unauthorized"


class Forbidden(DomainException):
    kind = "forbidden"


class Conflict(DomainException):
    """The write would duplicate an existing unique entity."""

    kind = "conflict"


class InvariantViolation(DomainException):
    """Stored derived fields disagree with their authoritative source."""

    kind = "invariant_violation"


class OrderTimeout(DomainException):
    """Order placement ran past its deadline and was rolled back."""

    kind = "timeout"
