# kurso/models/activity.py
# -*- coding: utf-8 -*-
"""
Modelos SQLAlchemy para actividades cobradas y sus exclusiones por alumno.
"""
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from kurso.database import Base
from datetime import datetime

class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True, index=True)
    name = Column(String(150), nullable=False) # también se usa para cruzar con el concepto del pago
    amount = Column(Float, nullable=False, default=0.0)
    activity_date = Column(Date, nullable=True) # sin fecha nunca se cobra

    tenant = relationship("Tenant", back_populates="activities")
    exclusions = relationship("ActivityExclusion", back_populates="activity", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="activity")


class ActivityExclusion(Base):
    __tablename__ = "activity_exclusions"
    __table_args__ = (UniqueConstraint("student_id", "activity_id", name="uq_exclusion_student_activity"),)

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False, index=True)
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    student = relationship("Student", back_populates="exclusions")
    activity = relationship("Activity", back_populates="exclusions")
