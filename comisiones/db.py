"""
Configuración de base de datos
"""
import logging
from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def init_db(app):
    """Inicializa la base de datos con la app Flask"""
    db.init_app(app)

    with app.app_context():
        # Los modelos deben estar importados para que create_all los vea
        from . import models  # noqa: F401
        db.create_all()
        logger.info("✅ Base de datos inicializada")
