"""Application service: payment provider config lookup.

Payments are handled client-side by the provider's SDK; the backend only
hands out the public client id.
"""

from __future__ import annotations


class PaymentConfigHandler:

    def __init__(self, paypal_client_id: str | None) -> None:
        self._paypal_client_id = paypal_client_id

    def handle(self) -> dict[str, str]:
        return {"clientId": self._paypal_client_id or "sb"}
