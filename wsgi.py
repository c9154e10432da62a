"""
Comisiones DLS - Aplicación Flask Principal
Calculadora de comisiones por factura y desglose mensual
"""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from comisiones.config import get_config
from comisiones.db import db, init_db
from comisiones.services.errors import CommissionError

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Factory para crear la aplicación Flask"""
    app = Flask(__name__)

    # Cargar configuración
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("📍 Database URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    # Habilitar CORS
    allowed_origins = app.config.get("ALLOWED_ORIGINS", "*").split(",")
    if "*" in allowed_origins:
        # Desarrollo: permitir todos
        CORS(app, resources={r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }})
    else:
        # Producción: dominios específicos
        CORS(app, resources={r"/api/*": {
            "origins": allowed_origins,
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "supports_credentials": True
        }})

    # Crear carpeta instance si no existe (SQLite en archivo)
    os.makedirs(os.path.join(os.path.dirname(os.path.abspath(__file__)), "instance"), exist_ok=True)

    # Inicializar base de datos
    init_db(app)

    with app.app_context():
        # Inicializar datos de prueba si es desarrollo
        if app.config["FLASK_ENV"] == "development":
            init_dev_data()

        from comisiones.api import (
            auth_bp, products_bp, sellers_bp, clients_bp, calculator_bp,
            invoices_bp, breakdown_bp, stats_bp, settings_bp, backup_bp,
        )

        app.register_blueprint(auth_bp, url_prefix="/api/auth")
        app.register_blueprint(products_bp, url_prefix="/api/products")
        app.register_blueprint(sellers_bp, url_prefix="/api/sellers")
        app.register_blueprint(clients_bp, url_prefix="/api/clients")
        app.register_blueprint(calculator_bp, url_prefix="/api/calculator")
        app.register_blueprint(invoices_bp, url_prefix="/api/invoices")
        app.register_blueprint(breakdown_bp, url_prefix="/api/breakdown")
        app.register_blueprint(stats_bp, url_prefix="/api/stats")
        app.register_blueprint(settings_bp, url_prefix="/api/settings")
        app.register_blueprint(backup_bp, url_prefix="/api/backup")

    @app.errorhandler(CommissionError)
    def handle_commission_error(error):
        if error.status_code >= 500:
            logger.error("❌ %s", error.message)
        return jsonify(error.to_dict()), error.status_code

    # Ruta de health check
    @app.route("/health")
    def health():
        return {"status": "ok", "message": "Comisiones DLS is running! 🧾"}

    return app


def init_dev_data():
    """Inicializa datos de desarrollo"""
    from comisiones.models import Product, Setting

    # Verificar si ya hay datos
    if Product.query.first():
        return

    logger.info("🌱 Inicializando datos de desarrollo...")

    products = [
        Product(name="Suplementos", percentage=20, color="#10b981", is_default=True),
        Product(name="Equipos", percentage=10, color="#3b82f6"),
        Product(name="Accesorios", percentage=15, color="#f59e0b"),
    ]
    for prod in products:
        db.session.add(prod)

    if Setting.query.first() is None:
        db.session.add(Setting(rest_percentage=25.0, last_ncf_number=0))

    db.session.commit()
    logger.info("✅ Datos de desarrollo inicializados (3 productos)")


# Crear instancia de la app para gunicorn
app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
