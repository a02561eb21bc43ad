"""Order reads for buyers, vendors and administrators, served from projections."""

import json

from protean.utils.globals import current_domain

from marketplace.domain import QUERY_LIMIT
from marketplace.errors import AuthorizationError
from marketplace.ordering.projections.order_detail import OrderDetail
from marketplace.ordering.projections.vendor_order import VendorOrder


def get_order(order_id, viewer):
    """A single order, visible to its buyer, admins and vendors with lines on it.

    Vendors with lines on the order see the whole order, including other vendors' lines.
    """
    view = current_domain.repository_for(OrderDetail).get(order_id)

    vendor_ids = json.loads(view.vendor_ids) if view.vendor_ids else []
    allowed = (
        str(view.user_id) == str(viewer.id)
        or viewer.is_admin
        or (viewer.is_vendor and str(viewer.id) in vendor_ids)
    )
    if not allowed:
        raise AuthorizationError("You do not have access to this order")
    return view.to_dict_view()


def list_orders_for_user(user_id):
    """The buyer's orders, newest first."""
    views = (
        current_domain.repository_for(OrderDetail)
        ._dao.query.filter(user_id=str(user_id))
        .order_by("-created_at")
        .limit(QUERY_LIMIT)
        .all()
        .items
    )
    return [view.to_dict_view() for view in views]


def list_orders_for_vendor(vendor_id):
    """Orders containing the vendor's products, restricted to the vendor's lines, newest first."""
    views = (
        current_domain.repository_for(VendorOrder)
        ._dao.query.filter(vendor_id=str(vendor_id))
        .order_by("-created_at")
        .limit(QUERY_LIMIT)
        .all()
        .items
    )
    return [view.to_dict_view() for view in views]


def list_all_orders():
    views = (
        current_domain.repository_for(OrderDetail)
        ._dao.query.order_by("-created_at")
        .limit(QUERY_LIMIT)
        .all()
        .items
    )
    return [view.to_dict_view() for view in views]
