# -*- coding: utf-8 -*-
"""
Rutas FastAPI para el registro de pagos.
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from kurso.database import get_db
from kurso.models.payment import Payment
from kurso.models.student import Student
from kurso.models.activity import Activity
from kurso.schemas.payment import PaymentCreate, PaymentRead

router = APIRouter(
    tags=["Pagos"],
    responses={404: {"description": "No encontrado"}},
)


@router.post("", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def create_payment(payment: PaymentCreate, db: Session = Depends(get_db)):
    if payment.student_id is not None and not db.query(Student).filter(Student.id == payment.student_id).first():
        raise HTTPException(status_code=404, detail="Alumno no encontrado")
    if payment.activity_id is not None and not db.query(Activity).filter(Activity.id == payment.activity_id).first():
        raise HTTPException(status_code=404, detail="Actividad no encontrada")

    db_payment = Payment(**payment.dict())
    if not db_payment.payment_date:
        db_payment.payment_date = date.today()
    db.add(db_payment)
    db.commit()
    db.refresh(db_payment)
    return db_payment


@router.get("", response_model=List[PaymentRead])
def read_payments(
    skip: int = 0,
    limit: int = 100,
    student_id: Optional[int] = None,
    activity_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Payment)
    if student_id is not None:
        query = query.filter(Payment.student_id == student_id)
    if activity_id is not None:
        query = query.filter(Payment.activity_id == activity_id)
    return query.order_by(Payment.payment_date.desc(), Payment.id.desc()).offset(skip).limit(limit).all()


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    db_payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if db_payment is None:
        raise HTTPException(status_code=404, detail="Pago no encontrado")
    db.delete(db_payment)
    db.commit()
    return None
