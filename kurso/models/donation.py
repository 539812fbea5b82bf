# kurso/models/donation.py
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from kurso.database import Base
from datetime import datetime

class ScheduledActivity(Base):
    __tablename__ = "scheduled_activities"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True, index=True)
    name = Column(String(150), nullable=False)
    scheduled_date = Column(Date, nullable=False)
    completed = Column(Boolean, default=False)
    is_with_donations = Column(Boolean, default=False)
    is_with_fee = Column(Boolean, default=False)

    donations = relationship("ActivityDonation", back_populates="scheduled_activity", cascade="all, delete-orphan")


class ActivityDonation(Base):
    __tablename__ = "activity_donations"

    id = Column(Integer, primary_key=True, index=True)
    scheduled_activity_id = Column(Integer, ForeignKey("scheduled_activities.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    unit = Column(String(50), nullable=False, default="")
    quantity = Column(Float, nullable=False, default=0.0)
    # NULL = fila base con la cantidad requerida; con alumno = compromiso
    student_id = Column(Integer, ForeignKey("students.id"), nullable=True, index=True)
    donated_at = Column(Date, nullable=True) # el admin confirma la entrega
    created_at = Column(DateTime, default=datetime.utcnow)

    scheduled_activity = relationship("ScheduledActivity", back_populates="donations")
    student = relationship("Student")
