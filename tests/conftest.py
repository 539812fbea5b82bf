import os

# Base en memoria antes de importar la app (main.py ejecuta create_all al importar)
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kurso.database import Base, get_db
from kurso.models.tenant import Tenant
from kurso.models.student import Student
from kurso.models.activity import Activity, ActivityExclusion
from kurso.models.payment import Payment
from kurso.models.credit import CreditMovement, StudentCredit
from kurso.models.donation import ScheduledActivity, ActivityDonation
from main import app


@pytest.fixture
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def add(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def course(db_session):
    """Curso con cuota de 2000, un alumno matriculado en marzo y una rifa en abril."""
    tenant = add(db_session, Tenant(name="4° Básico A", slug="4-basico-a", settings={"monthly_fee": 2000}))
    student = add(db_session, Student(
        tenant_id=tenant.id, first_name="Ana", last_name="Rojas", enrollment_date=date(2025, 3, 1),
    ))
    rifa = add(db_session, Activity(tenant_id=tenant.id, name="Rifa", amount=2000, activity_date=date(2025, 4, 1)))
    return tenant, student, rifa
