"""Carry-forward (이월) setting."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas import CarrySettingIn, CarrySettingOut
from app.services import CarryService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/carry", response_model=CarrySettingOut)
def get_carry(db: Session = Depends(get_db)):
    return CarryService(db).get()


@router.put("/carry", response_model=CarrySettingOut)
def update_carry(payload: CarrySettingIn, db: Session = Depends(get_db)):
    return CarryService(db).upsert(payload)
