from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from dealer_payments.domain.payment import BulkCalculationResult, PaymentType


CSV_HEADER = ("VIN", "Stock Number", "Status", "Monthly Payment", "Due at Signing", "Error")


def export_filename(payment_type: PaymentType, today: date) -> str:
    return f"bulk-calculations-{payment_type.value}-{today.isoformat()}.csv"


def export_bulk_results_csv(results: Iterable[BulkCalculationResult]) -> str:
    """
    Render bulk results as CSV, one row per vehicle after the header.

    Failed rows leave the payment columns empty; successful rows leave the
    error column empty.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for r in results:
        writer.writerow(
            [
                r.vin,
                r.stock_number,
                "Success" if r.success else "Failed",
                "" if r.payment is None else str(r.payment),
                "" if r.total_at_signing is None else str(r.total_at_signing),
                r.error or "",
            ]
        )

    return buffer.getvalue()
