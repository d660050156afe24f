"""Price-change audit trail."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction

from apps.catalog.models import Seller

from .domain.actor import ActorLike, require_actor
from .exceptions import ConstraintViolationError
from .models import SalePriceHistory
from .store import get_seller, store_errors

logger = logging.getLogger(__name__)


def record_price_change(
    sale_id: int,
    old_amount: Decimal,
    new_amount: Decimal,
    actor: ActorLike,
    seller: Optional[Seller] = None,
) -> SalePriceHistory:
    """
    Append one audit row for a sale amount change.

    Must run inside the transaction that changed the amount: any failure here
    propagates and rolls the amount change back with it. The change date is
    assigned by the model at write time.

    ``seller`` skips the lookup when the caller already loaded the acting
    seller. A seller that does not match the actor is looked up again.

    Raises:
        ConstraintViolationError: no actor supplied, or the amounts are equal
        NotFoundError: the acting seller does not exist
    """

    actor = require_actor(actor)
    if old_amount == new_amount:
        raise ConstraintViolationError(
            f"Refusing to audit a no-op price change on sale {sale_id}",
            rule="audit_requires_change",
        )
    if not transaction.get_connection().in_atomic_block:
        raise ConstraintViolationError(
            "Price changes must be audited inside the transaction that made them",
            rule="audit_requires_transaction",
        )

    if seller is None or seller.pk != actor.seller_id:
        seller = get_seller(actor.seller_id)
    with store_errors("record price change"):
        entry = SalePriceHistory.objects.create(
            sale_id=sale_id,
            old_amount=old_amount,
            new_amount=new_amount,
            changed_by=seller,
        )

    logger.info(
        f"Sale {sale_id} price {old_amount} -> {new_amount} by seller {seller.pk} "
        f"(history {entry.pk})"
    )
    return entry
