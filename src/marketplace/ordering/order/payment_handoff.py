"""Payment hand-off after an order is committed.

The order already exists when this runs. A collaborator failure is logged
and reported to the caller as a missing hand-off; the order stays pending so
the buyer can retry payment or an admin can cancel it.
"""

from marketplace.payments import PaymentHandoffError, get_collaborator
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def start_payment(order, email=None):
    """Ask the order's payment collaborator for a hand-off.

    Args:
        order: Order detail dict as returned by ``history.get_order``.
        email: Buyer email passed through to hosted checkouts.
    """
    collaborator = get_collaborator(order["payment_method"])
    try:
        handoff = collaborator.start(
            order_id=order["id"],
            amount=order["total"],
            currency=order["currency"],
            email=email,
        )
    except PaymentHandoffError as exc:
        logger.error(
            "payment_handoff_failed",
            order_id=order["id"],
            payment_method=order["payment_method"],
            reason=str(exc),
        )
        return None

    logger.info(
        "payment_handoff_started",
        order_id=order["id"],
        payment_method=handoff.method,
        reference=handoff.reference,
    )
    return handoff
