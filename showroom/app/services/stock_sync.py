from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List

from sqlalchemy.orm import Session

from showroom.app.db import models
from showroom.app.db.session import session_scope
from showroom.app.domain.stock import Vehicle

# Written on every import; list_price and special_price are handled separately.
SYNCED_FIELDS = [
    "status_code",
    "order_status",
    "processing_type",
    "reservation_details",
    "model_code",
    "model_name",
    "body_group",
    "color_code",
    "upholstery_code",
    "fuel_type",
    "drivetrain",
    "option_codes",
    "all_option_codes",
    "currency",
    "visibility",
    "production_date",
]


def _merge_stock_unit(session: Session, vehicle: Vehicle, synced_at: datetime) -> bool:
    unit = session.get(models.StockUnit, vehicle.vin)
    created = unit is None
    if created:
        unit = models.StockUnit(vin=vehicle.vin, list_price=Decimal("0"))
        session.add(unit)

    for field in SYNCED_FIELDS:
        setattr(unit, field, getattr(vehicle, field))
    # stock feeds carry no price; keep whatever was set by hand
    if vehicle.list_price > 0:
        unit.list_price = vehicle.list_price
    unit.last_synced_at = synced_at
    return created


def sync_stock_units(vehicles: List[Vehicle]) -> Dict[str, int]:
    """Upsert normalized vehicles by VIN.

    Returns:
        Counts of created and updated stock units.
    """
    if not vehicles:
        return {"created": 0, "updated": 0}

    synced_at = datetime.now(timezone.utc)
    created = 0
    updated = 0
    with session_scope() as session:
        for vehicle in vehicles:
            if _merge_stock_unit(session, vehicle, synced_at):
                created += 1
            else:
                updated += 1
            session.flush()

    return {"created": created, "updated": updated}


def vehicle_from_unit(unit: models.StockUnit) -> Vehicle:
    return Vehicle(
        vin=unit.vin,
        status_code=unit.status_code,
        model_code=unit.model_code,
        model_name=unit.model_name or "",
        body_group=unit.body_group or None,
        color_code=unit.color_code or "",
        upholstery_code=unit.upholstery_code or "",
        option_codes=list(unit.option_codes or []),
        all_option_codes=list(unit.all_option_codes or []),
        list_price=Decimal(unit.list_price or 0),
        special_price=Decimal(unit.special_price) if unit.special_price is not None else None,
        production_date=unit.production_date,
        visibility=unit.visibility,
        processing_type=unit.processing_type or "",
        order_status=unit.order_status or "",
        reservation_details=unit.reservation_details or "",
        fuel_type=unit.fuel_type,
        drivetrain=unit.drivetrain,
        currency=unit.currency or "",
    )
