from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from showroom.app.db import models
from showroom.app.db.session import get_session
from showroom.app.services.bulletins import load_active_bulletins
from showroom.app.services.pricing import quote_vehicle
from showroom.app.services.stock_sync import vehicle_from_unit

router = APIRouter()


@router.get("/{vin}/price")
async def vehicle_price(vin: str, on: Optional[date] = None, db: Session = Depends(get_session)):
    """Displayed price for a stock unit plus the bulletin rule behind it, if any."""
    unit = db.get(models.StockUnit, vin.strip().upper())
    if unit is None:
        raise HTTPException(status_code=404, detail=f"Unknown VIN '{vin}'")

    vehicle = vehicle_from_unit(unit)
    quote = quote_vehicle(vehicle, load_active_bulletins(db, today=on))
    return {"vin": vehicle.vin, "currency": vehicle.currency, **quote.as_dict()}
