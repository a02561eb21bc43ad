"""Bank transfer: the buyer is shown account details and a transfer reference."""

import os

from marketplace.payments.port import PaymentCollaborator, PaymentHandoff


def transfer_reference(order_id: str) -> str:
    """Short reference the buyer quotes on the transfer, derived from the order id."""
    return "ORD-" + str(order_id).replace("-", "")[:8].upper()


class BankTransferCollaborator(PaymentCollaborator):
    method = "bank_transfer"

    def __init__(
        self,
        bank_name: str | None = None,
        account_name: str | None = None,
        account_number: str | None = None,
    ) -> None:
        self.bank_name = bank_name or os.environ.get("BANK_NAME", "First National Bank")
        self.account_name = account_name or os.environ.get("BANK_ACCOUNT_NAME", "Your Store Name Ltd")
        self.account_number = account_number or os.environ.get("BANK_ACCOUNT_NUMBER", "1234567890")

    def start(self, order_id: str, amount: float, currency: str, email: str | None = None) -> PaymentHandoff:
        reference = transfer_reference(order_id)
        return PaymentHandoff(
            method=self.method,
            reference=reference,
            instructions={
                "bank_name": self.bank_name,
                "account_name": self.account_name,
                "account_number": self.account_number,
                "amount": f"{amount:.2f}",
                "currency": currency,
                "reference": reference,
            },
        )
