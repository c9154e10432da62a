#!/usr/bin/env python3
"""
Respaldo JSON desde la línea de comandos
Exporta todas las colecciones a RESPALDO_DLS_<fecha>.json o importa un respaldo

Uso:
    python scripts/backup_json.py export [carpeta]
    python scripts/backup_json.py import <archivo.json>
"""
import json
import sys
from pathlib import Path

# Agregar el directorio padre al path para importar módulos
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask
from comisiones.config import get_config
from comisiones.db import init_db
from comisiones.services import backup
from comisiones.services.errors import CommissionError


def make_app():
    app = Flask(__name__)
    app.config.from_object(get_config())
    init_db(app)
    return app


def export_to(folder):
    app = make_app()
    with app.app_context():
        data = backup.export_data()
        filename = backup.backup_filename(prefix=app.config["BACKUP_PREFIX"])

    output = Path(folder) / filename
    with open(output, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    print(f"✅ Respaldo guardado en {output}")
    for name, rows in data.items():
        print(f"   {name}: {len(rows)}")


def import_from(path):
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    app = make_app()
    with app.app_context():
        counts = backup.import_data(payload)

    print("✅ Respaldo importado")
    for name, count in counts.items():
        print(f"   {name}: {count}")


if __name__ == "__main__":
    if len(sys.argv) < 2 or sys.argv[1] not in ("export", "import"):
        print("Uso: python scripts/backup_json.py export [carpeta] | import <archivo.json>")
        sys.exit(1)

    try:
        if sys.argv[1] == "export":
            export_to(sys.argv[2] if len(sys.argv) > 2 else ".")
        else:
            if len(sys.argv) < 3 or not Path(sys.argv[2]).exists():
                print("❌ Error: indique un archivo de respaldo existente")
                sys.exit(1)
            import_from(sys.argv[2])
    except (CommissionError, ValueError) as e:
        print(f"❌ Error: {e}")
        sys.exit(1)
