"""Payment collaborator port (abstract interface).

Each payment method is served by one collaborator. A collaborator is asked
for a hand-off once the order is committed; confirming the payment happens
outside this system.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class PaymentHandoffError(Exception):
    """The collaborator could not start a payment. The order stays pending."""


@dataclass(frozen=True)
class PaymentHandoff:
    """What the client needs to continue paying for an order."""

    method: str
    reference: str
    redirect_url: str | None = None
    client_secret: str | None = None
    instructions: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "reference": self.reference,
            "redirect_url": self.redirect_url,
            "client_secret": self.client_secret,
            "instructions": dict(self.instructions),
        }


class PaymentCollaborator(ABC):
    """Abstract payment collaborator interface."""

    method: str

    @abstractmethod
    def start(self, order_id: str, amount: float, currency: str, email: str | None = None) -> PaymentHandoff:
        """Begin the out-of-band payment for an order."""
        ...
