from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from kurso.database import Base
from datetime import datetime

class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True, index=True)

    first_name = Column(String(100), index=True)
    last_name = Column(String(100), index=True)
    rut = Column(String(12), unique=True, index=True, nullable=True)
    email = Column(String(100), nullable=True)
    enrollment_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    tenant = relationship("Tenant", back_populates="students")
    payments = relationship("Payment", back_populates="student")
    exclusions = relationship("ActivityExclusion", back_populates="student", cascade="all, delete-orphan")
    credit_movements = relationship("CreditMovement", back_populates="student", cascade="all, delete-orphan")
    credit = relationship("StudentCredit", back_populates="student", uselist=False, cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or "Sin Nombre"
