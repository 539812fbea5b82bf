# kurso/models/credit.py
# -*- coding: utf-8 -*-
"""
Modelos SQLAlchemy para el crédito de los alumnos.

Un CreditMovement es el historial firmado; StudentCredit guarda el saldo
vigente de cada alumno.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from kurso.database import Base
from datetime import datetime

MOVEMENT_TYPES = ("payment_redirect", "activity_refund", "payment_deduction", "manual_adjustment")

class CreditMovement(Base):
    __tablename__ = "credit_movements"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False) # negativo = cuota cubierta con el traspaso
    type = Column(String(30), nullable=False)
    description = Column(Text, nullable=False, default="")
    source_payment_id = Column(Integer, ForeignKey("payments.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    student = relationship("Student", back_populates="credit_movements")
    source_payment = relationship("Payment")


class StudentCredit(Base):
    __tablename__ = "student_credits"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, unique=True)
    amount = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = relationship("Student", back_populates="credit")
