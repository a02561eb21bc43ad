"""Registers every domain element with ``marketplace``.

``Domain.init()`` only auto-discovers modules in this directory and its
immediate subdirectories. Aggregates, events, handlers and projectors that
live deeper are imported here, so that loading this module during
traversal registers all of them before the domain resolves references.
"""

from marketplace.accounts import addresses, events, profile, registration, user  # noqa: F401
from marketplace.catalogue.category import category, management  # noqa: F401
from marketplace.catalogue.category import events as category_events  # noqa: F401
from marketplace.catalogue.product import creation, details, lifecycle, product  # noqa: F401
from marketplace.catalogue.product import events as product_events  # noqa: F401
from marketplace.ordering.cart import cart, items  # noqa: F401
from marketplace.ordering.cart import events as cart_events  # noqa: F401
from marketplace.ordering.order import checkout, order, status  # noqa: F401
from marketplace.ordering.order import events as order_events  # noqa: F401
from marketplace.ordering.projections import order_detail, vendor_order  # noqa: F401
