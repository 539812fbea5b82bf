# -*- coding: utf-8 -*-
"""
Archivo principal de la aplicación FastAPI de Kurso: pagos, actividades,
créditos, donaciones y deudas de los alumnos de cada curso.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kurso.config import settings
from kurso.database import engine, Base

# Todos los modelos se importan antes de create_all para resolver las relaciones
from kurso.models import tenant, student, activity, payment, credit, donation

from kurso.routes import (students_fastapi, activities_fastapi, payments_fastapi,
                          credits_fastapi, debts_fastapi, scheduled_activities_fastapi)


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

try:
    Base.metadata.create_all(bind=engine)
    logging.info("Tablas creadas con éxito")
except Exception as e:
    logging.error(f"Error al crear tablas: {e}")
    raise


env = settings.ENVIRONMENT

app = FastAPI(
    title="API Kurso",
    description="API para la administración de cuotas, actividades y deudas de un curso",
    version="1.0.0",
    docs_url="/docs" if env != "production" else None,
    redoc_url="/redoc" if env != "production" else None,
    openapi_url="/openapi.json" if env != "production" else None
)

origins = [
    settings.FRONTEND_URL,
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Montaje de los routers
app.include_router(students_fastapi.router, prefix="/api/v1/students")
app.include_router(activities_fastapi.router, prefix="/api/v1/activities")
app.include_router(payments_fastapi.router, prefix="/api/v1/payments")
app.include_router(credits_fastapi.router, prefix="/api/v1/credits")
app.include_router(debts_fastapi.router, prefix="/api/v1/debts")
app.include_router(scheduled_activities_fastapi.router, prefix="/api/v1/scheduled-activities")


@app.get("/", tags=["Root"])
async def root():
    return {
        "mensaje": "API Kurso - Administración de cursos",
        "documentacion": "/docs",
        "endpoints": [
            {"students": "/api/v1/students"},
            {"activities": "/api/v1/activities"},
            {"payments": "/api/v1/payments"},
            {"credits": "/api/v1/credits"},
            {"debts": "/api/v1/debts"},
            {"scheduled-activities": "/api/v1/scheduled-activities"},
        ]
    }
