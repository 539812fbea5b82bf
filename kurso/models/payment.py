# kurso/models/payment.py
from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey
from sqlalchemy.orm import relationship
from kurso.database import Base
from datetime import date

class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True, index=True)
    folio = Column(Integer, nullable=True, index=True)
    # Pagos huérfanos existen (alumno eliminado o pago sin asignar)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=True, index=True)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=True, index=True)
    concept = Column(String(255), nullable=False, default="")
    amount = Column(Float, nullable=False)
    payment_date = Column(Date, default=date.today)
    month_period = Column(String(50), nullable=True)

    student = relationship("Student", back_populates="payments")
    activity = relationship("Activity", back_populates="payments")
