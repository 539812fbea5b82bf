# -*- coding: utf-8 -*-
"""
Rutas FastAPI para actividades programadas y compromisos de donación.
"""
from typing import List, Optional
from datetime import date
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from kurso.database import get_db
from kurso.debt_utils import normalize_name
from kurso.donation_utils import donation_completion, summarize_donation_items, validate_commitment
from kurso.exceptions import DonationUnavailableError
from kurso.models.donation import ScheduledActivity, ActivityDonation
from kurso.models.payment import Payment
from kurso.models.student import Student
from kurso.schemas.donation import (
    DonationCommit, DonationItemStatus, DonationRead, ScheduledActivityCreate, ScheduledActivityRead,
)

router = APIRouter(
    tags=["Actividades Programadas"],
    responses={404: {"description": "No encontrado"}},
)


def _get_scheduled_or_404(db: Session, scheduled_id: int) -> ScheduledActivity:
    db_activity = db.query(ScheduledActivity).options(joinedload(ScheduledActivity.donations))\
                    .filter(ScheduledActivity.id == scheduled_id).first()
    if db_activity is None:
        raise HTTPException(status_code=404, detail="Actividad programada no encontrada")
    return db_activity


def _completion(db: Session, activity: ScheduledActivity):
    """(completados, total) para la barra de avance del listado."""
    if activity.is_with_donations:
        return donation_completion(activity.donations)

    students = db.query(Student.id).filter(Student.tenant_id == activity.tenant_id).all()
    student_ids = {s.id for s in students}

    completed = 0
    if activity.is_with_fee and student_ids:
        # Los pagos de actividades programadas se identifican por el concepto
        name = normalize_name(activity.name)
        payments = db.query(Payment.student_id, Payment.concept).filter(Payment.student_id.in_(student_ids)).all()
        completed = len({p.student_id for p in payments if name and name in normalize_name(p.concept)})
    return completed, len(student_ids)


def _to_read(db: Session, activity: ScheduledActivity) -> ScheduledActivityRead:
    completed, total = _completion(db, activity)
    return ScheduledActivityRead(
        id=activity.id,
        name=activity.name,
        scheduled_date=activity.scheduled_date,
        completed=activity.completed,
        is_with_donations=activity.is_with_donations,
        is_with_fee=activity.is_with_fee,
        tenant_id=activity.tenant_id,
        completed_count=completed,
        total_count=total,
    )


@router.post("", response_model=ScheduledActivityRead, status_code=status.HTTP_201_CREATED)
def create_scheduled_activity(activity: ScheduledActivityCreate, db: Session = Depends(get_db)):
    datos = activity.dict(exclude={"donation_items"})
    db_activity = ScheduledActivity(**datos)
    db.add(db_activity)

    if activity.is_with_donations:
        for item in activity.donation_items:
            db_activity.donations.append(ActivityDonation(name=item.name, unit=item.unit, quantity=item.quantity))

    db.commit()
    db.refresh(db_activity)
    return _to_read(db, db_activity)


@router.get("", response_model=List[ScheduledActivityRead])
def read_scheduled_activities(
    tenant_id: Optional[int] = None,
    completed: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    query = db.query(ScheduledActivity).options(joinedload(ScheduledActivity.donations))
    if tenant_id is not None:
        query = query.filter(ScheduledActivity.tenant_id == tenant_id)
    if completed is not None:
        query = query.filter(ScheduledActivity.completed == completed)
    activities = query.order_by(ScheduledActivity.scheduled_date.desc()).all()
    return [_to_read(db, a) for a in activities]


@router.get("/{scheduled_id}/donations", response_model=List[DonationItemStatus])
def read_donation_items(scheduled_id: int, db: Session = Depends(get_db)):
    db_activity = _get_scheduled_or_404(db, scheduled_id)
    return summarize_donation_items(db_activity.donations)


@router.post("/{scheduled_id}/donations/commit", response_model=List[DonationRead], status_code=status.HTTP_201_CREATED)
def commit_donations(scheduled_id: int, commit: DonationCommit, db: Session = Depends(get_db)):
    """
    Registra lo que el alumno se compromete a donar. Todo el pedido se
    valida contra lo disponible antes de guardar.
    """
    db_activity = _get_scheduled_or_404(db, scheduled_id)
    if not db_activity.is_with_donations:
        raise HTTPException(status_code=400, detail="Esta actividad no recibe donaciones.")
    if not db.query(Student).filter(Student.id == commit.student_id).first():
        raise HTTPException(status_code=404, detail="Alumno no encontrado")

    summary = summarize_donation_items(db_activity.donations)
    new_rows = []
    try:
        for item in commit.items:
            status_item = validate_commitment(summary, item.name, item.unit, item.quantity)
            # Descuenta de lo disponible para validar ítems repetidos en el mismo pedido
            status_item.committed += item.quantity
            status_item.available -= item.quantity
            new_rows.append(ActivityDonation(
                name=status_item.name,
                unit=status_item.unit,
                quantity=item.quantity,
                student_id=commit.student_id,
            ))
    except DonationUnavailableError as e:
        raise HTTPException(status_code=400, detail=str(e))

    for row in new_rows:
        db_activity.donations.append(row)
    db.commit()
    logging.info(f"Alumno {commit.student_id} comprometió {len(new_rows)} ítem(s) para la actividad {scheduled_id}")
    for row in new_rows:
        db.refresh(row)
    return new_rows


@router.post("/donations/{donation_id}/fulfill", response_model=DonationRead)
def fulfill_donation(donation_id: int, donated_at: Optional[date] = None, db: Session = Depends(get_db)):
    db_donation = db.query(ActivityDonation).filter(ActivityDonation.id == donation_id).first()
    if db_donation is None:
        raise HTTPException(status_code=404, detail="Donación no encontrada")
    if db_donation.student_id is None:
        raise HTTPException(status_code=400, detail="Solo se confirman compromisos de alumnos.")
    db_donation.donated_at = donated_at or date.today()
    db.commit()
    db.refresh(db_donation)
    return db_donation
