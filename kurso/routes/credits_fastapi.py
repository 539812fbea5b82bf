# -*- coding: utf-8 -*-
"""
Rutas FastAPI para movimientos de crédito y saldo a favor de los alumnos.
"""
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from kurso.database import get_db
from kurso.debt_utils import REDIRECT_TYPE, credit_balance
from kurso.models.credit import CreditMovement, StudentCredit
from kurso.models.payment import Payment
from kurso.models.student import Student
from kurso.schemas.credit import CreditBalance, CreditMovementCreate, CreditMovementRead, PaymentRedirect

router = APIRouter(
    tags=["Créditos"],
    responses={404: {"description": "No encontrado"}},
)


def register_movement(db: Session, movement: CreditMovement) -> CreditMovement:
    """
    Agrega el movimiento y mantiene `student_credits` al día. Los traspasos
    negativos se aplican a las cuotas y no tocan el saldo a favor.
    """
    db.add(movement)
    delta = credit_balance([movement])
    if delta:
        credit = db.query(StudentCredit).filter(StudentCredit.student_id == movement.student_id).first()
        if credit is None:
            credit = StudentCredit(student_id=movement.student_id, amount=0.0)
            db.add(credit)
        credit.amount = (credit.amount or 0.0) + delta
    db.commit()
    db.refresh(movement)
    return movement


@router.post("/movements", response_model=CreditMovementRead, status_code=status.HTTP_201_CREATED)
def create_movement(movement: CreditMovementCreate, db: Session = Depends(get_db)):
    if not db.query(Student).filter(Student.id == movement.student_id).first():
        raise HTTPException(status_code=404, detail="Alumno no encontrado")
    return register_movement(db, CreditMovement(**movement.dict()))


@router.get("/movements", response_model=List[CreditMovementRead])
def read_movements(student_id: int, db: Session = Depends(get_db)):
    return db.query(CreditMovement).filter(CreditMovement.student_id == student_id)\
                                   .order_by(CreditMovement.created_at.desc()).all()


@router.get("/balance/{student_id}", response_model=CreditBalance)
def read_balance(student_id: int, db: Session = Depends(get_db)):
    if not db.query(Student).filter(Student.id == student_id).first():
        raise HTTPException(status_code=404, detail="Alumno no encontrado")
    credit = db.query(StudentCredit).filter(StudentCredit.student_id == student_id).first()
    return CreditBalance(student_id=student_id, amount=credit.amount if credit else 0.0)


@router.post("/redirect", response_model=CreditMovementRead, status_code=status.HTTP_201_CREATED)
def redirect_payment(redirect: PaymentRedirect, db: Session = Depends(get_db)):
    """
    Traspasa un pago: como saldo a favor (monto positivo) o como cuotas
    cubiertas (monto negativo).
    """
    payment = db.query(Payment).filter(Payment.id == redirect.payment_id).first()
    if payment is None:
        raise HTTPException(status_code=404, detail="Pago no encontrado")
    if payment.student_id is None:
        raise HTTPException(status_code=400, detail="El pago no está asociado a un alumno.")

    already = db.query(CreditMovement).filter(CreditMovement.source_payment_id == payment.id).first()
    if already:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Este pago ya fue traspasado.")

    amount = abs(payment.amount)
    if redirect.target == "debts":
        amount = -amount

    movement = CreditMovement(
        student_id=payment.student_id,
        amount=amount,
        type=REDIRECT_TYPE,
        description=f"Redirección de pago folio #{payment.folio or payment.id}: {payment.concept}",
        source_payment_id=payment.id,
    )
    logging.info(f"Traspaso del pago {payment.id} ({redirect.target}) para el alumno {payment.student_id}")
    return register_movement(db, movement)
