# kurso/models/tenant.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship
from kurso.database import Base
from kurso.config import settings as app_settings
from datetime import datetime

class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=True)
    settings = Column(JSON, nullable=True) # ej: {"monthly_fee": 3500}
    created_at = Column(DateTime, default=datetime.utcnow)

    students = relationship("Student", back_populates="tenant")
    activities = relationship("Activity", back_populates="tenant")

    @property
    def monthly_fee(self) -> float:
        """Cuota mensual del curso; usa el valor global cuando el tenant no la configura."""
        fee = (self.settings or {}).get("monthly_fee")
        if fee is None:
            return app_settings.DEFAULT_MONTHLY_FEE
        return float(fee)
