# -*- coding: utf-8 -*-
"""
Rutas FastAPI para el CRUD de actividades y las exclusiones de alumnos.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from kurso.database import get_db
from kurso.models.activity import Activity, ActivityExclusion
from kurso.models.student import Student
from kurso.schemas.activity import (
    ActivityCreate, ActivityRead, ActivityUpdate, ExclusionCreate, ExclusionRead,
)

router = APIRouter(
    tags=["Actividades"],
    responses={404: {"description": "No encontrado"}},
)


def _get_activity_or_404(db: Session, activity_id: int) -> Activity:
    db_activity = db.query(Activity).filter(Activity.id == activity_id).first()
    if db_activity is None:
        raise HTTPException(status_code=404, detail="Actividad no encontrada")
    return db_activity


@router.post("", response_model=ActivityRead, status_code=status.HTTP_201_CREATED)
def create_activity(activity: ActivityCreate, db: Session = Depends(get_db)):
    db_activity = Activity(**activity.dict())
    db.add(db_activity)
    db.commit()
    db.refresh(db_activity)
    return db_activity


@router.get("", response_model=List[ActivityRead])
def read_activities(tenant_id: Optional[int] = None, db: Session = Depends(get_db)):
    query = db.query(Activity)
    if tenant_id is not None:
        query = query.filter(Activity.tenant_id == tenant_id)
    return query.order_by(Activity.activity_date.desc(), Activity.name).all()


@router.get("/{activity_id}", response_model=ActivityRead)
def read_activity(activity_id: int, db: Session = Depends(get_db)):
    return _get_activity_or_404(db, activity_id)


@router.put("/{activity_id}", response_model=ActivityRead)
def update_activity(activity_id: int, datos: ActivityUpdate, db: Session = Depends(get_db)):
    db_activity = _get_activity_or_404(db, activity_id)
    for key, value in datos.dict(exclude_unset=True).items():
        setattr(db_activity, key, value)
    db.commit()
    db.refresh(db_activity)
    return db_activity


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(activity_id: int, db: Session = Depends(get_db)):
    db_activity = _get_activity_or_404(db, activity_id)
    db.delete(db_activity)
    db.commit()
    return None


# --- Exclusiones ---

@router.get("/{activity_id}/exclusions", response_model=List[ExclusionRead])
def read_exclusions(activity_id: int, db: Session = Depends(get_db)):
    _get_activity_or_404(db, activity_id)
    return db.query(ActivityExclusion).filter(ActivityExclusion.activity_id == activity_id).all()


@router.post("/{activity_id}/exclusions", response_model=ExclusionRead, status_code=status.HTTP_201_CREATED)
def create_exclusion(activity_id: int, exclusion: ExclusionCreate, db: Session = Depends(get_db)):
    """Libera al alumno del cobro de esta actividad."""
    _get_activity_or_404(db, activity_id)
    if not db.query(Student).filter(Student.id == exclusion.student_id).first():
        raise HTTPException(status_code=404, detail="Alumno no encontrado")

    existing = db.query(ActivityExclusion).filter(
        ActivityExclusion.activity_id == activity_id,
        ActivityExclusion.student_id == exclusion.student_id
    ).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El alumno ya está excluido de esta actividad.")

    db_exclusion = ActivityExclusion(activity_id=activity_id, **exclusion.dict())
    db.add(db_exclusion)
    db.commit()
    db.refresh(db_exclusion)
    return db_exclusion


@router.delete("/{activity_id}/exclusions/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exclusion(activity_id: int, student_id: int, db: Session = Depends(get_db)):
    db_exclusion = db.query(ActivityExclusion).filter(
        ActivityExclusion.activity_id == activity_id,
        ActivityExclusion.student_id == student_id
    ).first()
    if db_exclusion is None:
        raise HTTPException(status_code=404, detail="Exclusión no encontrada")
    db.delete(db_exclusion)
    db.commit()
    return None
