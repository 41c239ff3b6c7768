"""HTTP implementation of ManufacturerRateFeed for dealer incentive JSON feeds."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from dealer_payments.domain.rates import ManufacturerRateRecord
from dealer_payments.domain.vehicle import IncentiveType
from dealer_payments.ports.manufacturer_rate_feed import ManufacturerRateFeed

logger = logging.getLogger(__name__)

DEFAULT_FINANCE_TERM = 60
DEFAULT_VALIDITY_DAYS = 30


class HttpManufacturerRateFeed(ManufacturerRateFeed):
    """
    Fetches a manufacturer's regional finance feed and normalizes it.

    - URL is built from a template with a {make} placeholder
    - Only finance offers carrying a rate are kept
    - Offers with an unparseable rate are dropped (logged)
    - Transport errors and non-2xx responses propagate to the caller
    """

    def __init__(
        self,
        url_template: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize feed adapter.

        Args:
            url_template: Feed URL with a {make} placeholder (lower-cased make)
            timeout_seconds: Per-request timeout passed to httpx
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._url_template = url_template
        self._timeout = timeout_seconds
        self._transport = transport

    def url_for(self, make: str) -> str:
        return self._url_template.format(make=make.lower())

    async def fetch_rates(self, make: str) -> list[ManufacturerRateRecord]:
        url = self.url_for(make)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.get(url)
            resp.raise_for_status()
        payload = resp.json()

        records = parse_feed(payload, default_make=make, today=date.today())
        logger.info(
            "Loaded manufacturer rates from feed",
            extra={"make": make, "count": len(records), "url": url},
        )
        return records


def _parse_date(value: Any, default: date) -> date:
    if not value:
        return default
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return default


def _parse_record(
    item: dict[str, Any], default_make: str, today: date
) -> ManufacturerRateRecord | None:
    if item.get("incentive_type") != IncentiveType.FINANCE.value or not item.get("finance_rate"):
        return None

    try:
        rate = Decimal(str(item["finance_rate"]))
    except InvalidOperation:
        logger.warning(
            "Skipping feed offer with invalid rate",
            extra={"model": item.get("model"), "finance_rate": item.get("finance_rate")},
        )
        return None
    if not rate.is_finite():
        return None

    try:
        term = int(item.get("finance_term") or DEFAULT_FINANCE_TERM)
    except (TypeError, ValueError):
        logger.warning(
            "Skipping feed offer with invalid term",
            extra={"model": item.get("model"), "finance_term": item.get("finance_term")},
        )
        return None

    valid_through = _parse_date(
        item.get("valid_through"), today + timedelta(days=DEFAULT_VALIDITY_DAYS)
    )
    headline = item.get("offer_headline") or item.get("title_raw") or ""

    return ManufacturerRateRecord(
        year=str(item.get("year") or today.year),
        make=item.get("make") or default_make,
        model=item.get("model") or "",
        trim=item.get("trim") or "",
        incentive_type=IncentiveType.FINANCE,
        rate=rate,
        term=term,
        valid_from=_parse_date(item.get("valid_from"), today),
        valid_through=valid_through,
        offer_headline=headline,
        title=item.get("title_raw") or headline,
        disclaimer=(
            item.get("finance_disclaimer")
            or item.get("disclaimer_raw")
            or item.get("combined_disclaimer")
            or ""
        ),
        program_name=item.get("oem_program_name") or "",
        expiration_date=item.get("expiration_date") or valid_through.isoformat(),
    )


def parse_feed(payload: Any, default_make: str, today: date) -> list[ManufacturerRateRecord]:
    """
    Decode a feed payload (a JSON array of offers) into rate records.

    Non-list payloads yield no records.
    """
    if not isinstance(payload, list):
        logger.warning("Unexpected feed payload shape", extra={"type": type(payload).__name__})
        return []

    records = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        record = _parse_record(item, default_make, today)
        if record is not None:
            records.append(record)
    return records
