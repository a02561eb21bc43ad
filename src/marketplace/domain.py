"""Marketplace domain: accounts, catalogue, carts, orders and payment hand-off.

A single domain so that placing an order and emptying the buyer's cart commit
in the same unit of work.
"""

import os

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")

# Upper bound on rows returned by any unpaginated listing
QUERY_LIMIT = int(os.environ.get("QUERY_LIMIT", "10000"))
