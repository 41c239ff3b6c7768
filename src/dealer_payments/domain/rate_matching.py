"""
Manufacturer rate matching.

Feed records are loosely normalized: model names may be repeated
("F-150 F-150"), trims are optional, and eligible terms are either a maximum
or a range spelled out in the offer headline ("24-48 MOS"). The helpers here
tolerate those variations; find_best_rate picks the cheapest valid offer.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Sequence

from dealer_payments.domain.rates import ManufacturerRateRecord, RateMatch
from dealer_payments.domain.vehicle import IncentiveType, Vehicle

logger = logging.getLogger(__name__)

_TERM_RANGE_PATTERN = re.compile(r"(\d+)-(\d+)\s*MOS", re.IGNORECASE)
_SEPARATORS = re.compile(r"[-\s]")


def _normalize_model(model: str) -> str:
    return _SEPARATORS.sub("", model.lower())


def is_model_match(rate_model: str, vehicle_model: str) -> bool:
    if not rate_model or not vehicle_model:
        return False

    rate_norm = _normalize_model(rate_model)
    vehicle_norm = _normalize_model(vehicle_model)
    if not rate_norm or not vehicle_norm:
        return False

    if rate_norm == vehicle_norm:
        return True
    if rate_norm in vehicle_norm or vehicle_norm in rate_norm:
        return True

    # Feed values sometimes repeat the model name ("F-150 F-150")
    return rate_model.lower().split()[0] == vehicle_model.lower().split()[0]


def is_trim_match(rate_trim: str, vehicle_trim: str) -> bool:
    if not rate_trim:
        return True
    rate_trim = rate_trim.lower()
    vehicle_trim = (vehicle_trim or "").lower()
    return rate_trim == vehicle_trim or rate_trim in vehicle_trim


def is_term_in_range(requested_term: int, rate_term: int, offer_headline: str) -> bool:
    if requested_term == rate_term:
        return True

    if offer_headline:
        for match in _TERM_RANGE_PATTERN.finditer(offer_headline):
            if int(match.group(1)) <= requested_term <= int(match.group(2)):
                return True

        specific_term = re.compile(rf"(?<!\d){requested_term}\s*MOS", re.IGNORECASE)
        if specific_term.search(offer_headline):
            return True

    # Record terms are the maximum eligible term by default
    return requested_term <= rate_term


def _is_candidate(
    record: ManufacturerRateRecord,
    vehicle: Vehicle,
    term: int,
    today: date,
    *,
    consider_trim: bool,
) -> bool:
    build = vehicle.build
    if record.incentive_type is not IncentiveType.FINANCE:
        return False
    if record.year != str(build.year):
        return False
    if (record.make or "").lower() != build.make.lower():
        return False
    if not is_model_match(record.model, build.model):
        return False
    if consider_trim and not is_trim_match(record.trim, build.trim):
        return False
    if today > record.valid_through:
        return False
    return is_term_in_range(term, record.term, record.offer_headline)


def find_best_rate(
    records: Sequence[ManufacturerRateRecord],
    vehicle: Vehicle,
    term: int,
    today: date,
) -> RateMatch | None:
    """
    Lowest-rate manufacturer finance offer valid for the vehicle and term.

    Trim-aware matching is tried first, then trim is ignored. Ties keep the
    order of the source records.
    """
    if not records:
        logger.warning("No manufacturer rates loaded", extra={"vin": vehicle.vin})
        return None

    matches = [r for r in records if _is_candidate(r, vehicle, term, today, consider_trim=True)]
    if not matches:
        matches = [
            r for r in records if _is_candidate(r, vehicle, term, today, consider_trim=False)
        ]

    if not matches:
        logger.debug(
            "No manufacturer rate found",
            extra={"vehicle": vehicle.describe(), "term": term},
        )
        return None

    best = min(matches, key=lambda r: r.rate)
    return RateMatch(
        rate=best.rate,
        term=best.term,
        disclaimer=best.disclaimer,
        program_name=best.program_name,
        expiration_date=best.expiration_date or best.valid_through.isoformat(),
    )

