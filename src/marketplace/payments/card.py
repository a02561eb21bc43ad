"""Card payments through a payment-intent API.

The intent is simulated locally: the collaborator mints an intent id and a
client secret the card form would use. It can be told to fail, which makes
it useful for exercising the "order placed, payment not started" path.
"""

from uuid import uuid4

from marketplace.payments.port import PaymentCollaborator, PaymentHandoff, PaymentHandoffError


class CardIntentCollaborator(PaymentCollaborator):
    method = "card"

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment intent could not be created"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment intent could not be created") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def start(self, order_id: str, amount: float, currency: str, email: str | None = None) -> PaymentHandoff:
        self.calls.append({"order_id": order_id, "amount": amount, "currency": currency, "email": email})

        if not self.should_succeed:
            raise PaymentHandoffError(self.failure_reason)

        intent_id = f"pi_{uuid4().hex[:24]}"
        return PaymentHandoff(
            method=self.method,
            reference=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:16]}",
            # Intents are created in the currency's minor unit
            instructions={"amount_minor": int(round(amount * 100)), "currency": currency.lower()},
        )
