"""Hosted checkout: the buyer is redirected to the provider's payment page."""

import os
from urllib.parse import urlencode
from uuid import uuid4

from marketplace.payments.port import PaymentCollaborator, PaymentHandoff


class HostedRedirectCollaborator(PaymentCollaborator):
    method = "hosted_redirect"

    def __init__(self, checkout_url: str | None = None) -> None:
        self.checkout_url = checkout_url or os.environ.get(
            "HOSTED_CHECKOUT_URL", "https://checkout.example.com/pay"
        )

    def start(self, order_id: str, amount: float, currency: str, email: str | None = None) -> PaymentHandoff:
        token = f"tx_{uuid4().hex[:20]}"
        query = {"tx_ref": token, "order_id": order_id, "amount": f"{amount:.2f}", "currency": currency}
        if email:
            query["email"] = email
        return PaymentHandoff(
            method=self.method,
            reference=token,
            redirect_url=f"{self.checkout_url}?{urlencode(query)}",
        )
