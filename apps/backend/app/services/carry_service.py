from __future__ import annotations

from sqlalchemy.orm import Session

from app import models
from app.ledger.aggregation import Carry, num
from app.schemas import CarrySettingIn


class CarryService:
    """Read and upsert the singleton carry-forward setting."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _row(self) -> models.CarrySetting | None:
        return self.db.get(models.CarrySetting, models.CARRY_SETTING_KEY)

    def get(self) -> models.CarrySetting:
        """Stored setting, or an unsaved default of (last year, 0)."""
        row = self._row()
        if row is not None:
            return row
        return models.CarrySetting(
            key=models.CARRY_SETTING_KEY,
            prev_year=models.now_local_naive().year - 1,
            prev_carry=0,
        )

    def carry(self) -> Carry:
        row = self.get()
        return Carry(prev_year=int(row.prev_year), prev_carry=num(row.prev_carry))

    def upsert(self, payload: CarrySettingIn) -> models.CarrySetting:
        row = self._row()
        if row is None:
            row = models.CarrySetting(key=models.CARRY_SETTING_KEY)
            self.db.add(row)
        row.prev_year = payload.prev_year
        row.prev_carry = payload.prev_carry
        row.updated_at = models.now_local_naive()
        self.db.commit()
        self.db.refresh(row)
        return row
