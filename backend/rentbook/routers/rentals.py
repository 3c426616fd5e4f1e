# backend/rentbook/routers/rentals.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..schemas import RentalCreate, RentalOut, RentalUpdate, RentalWriteOut
from ..services import ledger_service
from ..services.ownership import must_get_rental

router = APIRouter(prefix="/rentals", tags=["rentals"])


@router.get("", response_model=List[RentalOut])
def list_rentals(
    unit_id: Optional[int] = Query(default=None, alias="unitId"),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return ledger_service.list_rentals(db, user_id=p.user_id, unit_id=unit_id)


@router.get("/{rental_id}", response_model=RentalOut)
def get_rental(rental_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return must_get_rental(db, user_id=p.user_id, rental_id=rental_id)


@router.post("", response_model=RentalWriteOut, status_code=201)
def create_rental(payload: RentalCreate, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    row = ledger_service.create_rental(
        db,
        user_id=p.user_id,
        unit_id=payload.unit_id,
        month=payload.month,
        year=payload.year,
        amount=payload.amount,
        rent_amount=payload.rent_amount,
        utilities_amount=payload.utilities_amount,
        is_paid=payload.is_paid,
        notes=payload.notes,
    )
    return {"message": "Mieteinnahme erfolgreich erstellt", "rental": row}


@router.put("/{rental_id}", response_model=RentalWriteOut)
def update_rental(
    rental_id: int,
    payload: RentalUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row = ledger_service.update_rental(
        db,
        user_id=p.user_id,
        rental_id=rental_id,
        month=payload.month,
        year=payload.year,
        amount=payload.amount,
        rent_amount=payload.rent_amount,
        utilities_amount=payload.utilities_amount,
        is_paid=payload.is_paid,
        notes=payload.notes,
    )
    return {"message": "Mieteinnahme erfolgreich aktualisiert", "rental": row}
