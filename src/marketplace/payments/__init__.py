"""Payment collaborator registry.

Provides get_collaborator() / set_collaborator() to swap the adapter used for
a payment method (tests replace them with configured fakes).
"""

from marketplace.payments.bank_transfer import BankTransferCollaborator
from marketplace.payments.card import CardIntentCollaborator
from marketplace.payments.hosted_redirect import HostedRedirectCollaborator
from marketplace.payments.port import PaymentCollaborator, PaymentHandoff, PaymentHandoffError

_DEFAULTS = {
    CardIntentCollaborator.method: CardIntentCollaborator,
    HostedRedirectCollaborator.method: HostedRedirectCollaborator,
    BankTransferCollaborator.method: BankTransferCollaborator,
}

_current: dict[str, PaymentCollaborator] = {}


def get_collaborator(method: str) -> PaymentCollaborator:
    """Return the collaborator for a payment method, creating the default on first use."""
    if method not in _current:
        if method not in _DEFAULTS:
            raise KeyError(f"No payment collaborator for method '{method}'")
        _current[method] = _DEFAULTS[method]()
    return _current[method]


def set_collaborator(method: str, collaborator: PaymentCollaborator) -> None:
    _current[method] = collaborator


def reset_collaborators() -> None:
    _current.clear()


__all__ = [
    "PaymentCollaborator",
    "PaymentHandoff",
    "PaymentHandoffError",
    "get_collaborator",
    "reset_collaborators",
    "set_collaborator",
]
