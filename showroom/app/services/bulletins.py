"""Select the bulletins that take part in pricing today."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from showroom.app.db import models
from showroom.app.domain.bulletins import Bulletin

logger = logging.getLogger(__name__)


def is_bulletin_active(bulletin: Bulletin, today: date) -> bool:
    if not bulletin.is_active:
        return False
    if bulletin.valid_from and bulletin.valid_from > today:
        return False
    if bulletin.valid_until and bulletin.valid_until < today:
        return False
    return True


def filter_active_bulletins(bulletins: Iterable[Bulletin], today: Optional[date] = None) -> List[Bulletin]:
    today = today or date.today()
    return [bulletin for bulletin in bulletins if is_bulletin_active(bulletin, today)]


def _record_from_row(row: models.Bulletin) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "description": row.description,
        "rules": row.rules,
        "is_active": row.is_active,
        "valid_from": row.valid_from,
        "valid_until": row.valid_until,
        "model_codes": row.model_codes,
        "body_groups": row.body_groups,
        "production_year_min": row.production_year_min,
        "production_year_max": row.production_year_max,
        "discount_percent": row.discount_percent,
        "discount_amount": row.discount_amount,
    }


def load_active_bulletins(session: Session, today: Optional[date] = None) -> List[Bulletin]:
    rows = session.execute(
        select(models.Bulletin).where(models.Bulletin.is_active.is_(True)).order_by(models.Bulletin.id)
    ).scalars().all()

    bulletins: List[Bulletin] = []
    for row in rows:
        try:
            bulletins.append(Bulletin.from_record(_record_from_row(row)))
        except ValueError as exc:
            logger.warning("Skipping bulletin %s with invalid rules: %s", row.id, exc)
    return filter_active_bulletins(bulletins, today)
