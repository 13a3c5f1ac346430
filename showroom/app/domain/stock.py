"""Normalized stock records produced by the feed normalizers."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

PUBLIC = "PUBLIC"
INTERNAL = "INTERNAL"

ERROR_PREVIEW_LIMIT = 10


@dataclass
class Vehicle:
    vin: str
    status_code: int
    model_code: str
    color_code: str = ""
    upholstery_code: str = ""
    model_name: str = ""
    body_group: Optional[str] = None
    option_codes: List[str] = field(default_factory=list)
    all_option_codes: List[str] = field(default_factory=list)
    list_price: Decimal = Decimal("0")
    special_price: Optional[Decimal] = None
    production_date: Optional[str] = None
    visibility: str = PUBLIC
    processing_type: str = ""
    order_status: str = ""
    reservation_details: str = ""
    fuel_type: Optional[str] = None
    drivetrain: Optional[str] = None
    currency: str = "PLN"

    @property
    def production_year(self) -> Optional[int]:
        if not self.production_date:
            return None
        try:
            return int(str(self.production_date)[:4])
        except ValueError:
            return None


@dataclass
class ImportResult:
    vehicles: List[Vehicle] = field(default_factory=list)
    processed: int = 0
    skipped_by_status: int = 0
    skipped_by_type: int = 0
    hidden_internal: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    header_row: Optional[int] = None
    header_fallback: bool = False

    def accept(self, vehicle: Vehicle) -> None:
        self.vehicles.append(vehicle)
        self.processed += 1

    def merge(self, other: "ImportResult") -> "ImportResult":
        """Fold a shard's result into this one and return self."""
        self.vehicles.extend(other.vehicles)
        self.processed += other.processed
        self.skipped_by_status += other.skipped_by_status
        self.skipped_by_type += other.skipped_by_type
        self.hidden_internal += other.hidden_internal
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def as_counters(self) -> Dict[str, int]:
        return {
            "processed": self.processed,
            "skipped_status": self.skipped_by_status,
            "skipped_type": self.skipped_by_type,
            "hidden_de": self.hidden_internal,
        }


def error_preview(errors: List[str], limit: int = ERROR_PREVIEW_LIMIT) -> List[str]:
    if len(errors) <= limit:
        return list(errors)
    return list(errors[:limit]) + [f"+{len(errors) - limit} more"]
