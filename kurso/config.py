# -*- coding: utf-8 -*-
"""
Configuración de la aplicación Kurso leída desde variables de entorno (.env).
"""

import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./kurso.db")
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Cuota mensual por defecto; cada tenant puede sobrescribirla en settings["monthly_fee"]
    DEFAULT_MONTHLY_FEE = float(os.environ.get("KURSO_MONTHLY_FEE", 3000))
    # El año escolar se cobra desde marzo
    BILLING_START_MONTH = 3


settings = Settings()
