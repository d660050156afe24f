"""Post-commit handlers for sales domain events."""

from __future__ import annotations

import structlog

from shared.application.message_bus import message_bus

from .domain.events import LegAttached, SalePriceChanged, SaleRecorded, TransportAttached

logger = structlog.get_logger("apps.sales.events")


def log_event(event) -> None:
    payload = event.to_dict()
    logger.info("domain_event_committed", **payload)


def log_price_change(event: SalePriceChanged) -> None:
    logger.info(
        "sale_price_changed",
        sale_id=event.sale_id,
        old_amount=str(event.old_amount),
        new_amount=str(event.new_amount),
        changed_by=event.changed_by,
    )


def register() -> None:
    for event_type in (SaleRecorded, SalePriceChanged, TransportAttached, LegAttached):
        message_bus.register_event_handler(event_type, log_event)
    message_bus.register_event_handler(SalePriceChanged, log_price_change)
