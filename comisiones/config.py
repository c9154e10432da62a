"""
Configuración de la aplicación
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Directorio base del proyecto
BASE_DIR = Path(__file__).resolve().parent.parent

# Cargar .env desde el directorio del proyecto
load_dotenv(BASE_DIR / '.env')


class Config:
    """Configuración base"""

    # Flask
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Database con path absoluto
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or f"sqlite:///{BASE_DIR}/instance/comisiones.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Acceso (usuario fijo + contraseña compartida)
    APP_USERNAME = os.getenv("APP_USERNAME", "dls")
    APP_PASSWORD = os.getenv("APP_PASSWORD", "cambiar-esta-clave")
    MAX_LOGIN_ATTEMPTS = int(os.getenv("MAX_LOGIN_ATTEMPTS", "5"))
    LOCKOUT_SECONDS = int(os.getenv("LOCKOUT_SECONDS", "300"))
    TOKEN_DAYS = int(os.getenv("TOKEN_DAYS", "7"))

    # Facturación
    NCF_PREFIX = os.getenv("NCF_PREFIX", "B01000")
    DEFAULT_REST_PERCENTAGE = float(os.getenv("DEFAULT_REST_PERCENTAGE", "25"))

    # Política cuando los productos especiales superan el total: "clamp" | "reject"
    OVER_ENTRY_POLICY_SAVE = os.getenv("OVER_ENTRY_POLICY_SAVE", "clamp")
    OVER_ENTRY_POLICY_UPDATE = os.getenv("OVER_ENTRY_POLICY_UPDATE", "reject")

    # Reportes y respaldos
    STATS_YEARS_WINDOW = int(os.getenv("STATS_YEARS_WINDOW", "6"))
    BACKUP_PREFIX = os.getenv("BACKUP_PREFIX", "RESPALDO_DLS")

    # CORS
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*")


class DevelopmentConfig(Config):
    """Configuración de desarrollo"""
    DEBUG = True


class ProductionConfig(Config):
    """Configuración de producción"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Configuración para pytest (SQLite en memoria)"""
    TESTING = True
    FLASK_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    APP_USERNAME = "dls"
    APP_PASSWORD = "clave-de-prueba"
    MAX_LOGIN_ATTEMPTS = 3
    LOCKOUT_SECONDS = 60


# Mapeo de configuraciones
config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name=None):
    """Obtiene la configuración según el entorno"""
    env = name or os.getenv("FLASK_ENV", "development")
    return config_by_name.get(env, DevelopmentConfig)
