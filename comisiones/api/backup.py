"""
API: Respaldos
Exportar todo a JSON, importar un respaldo y formatear el sistema
"""
import json

from flask import Blueprint, Response, current_app, request, jsonify

from ..services import backup
from ..services.errors import InvalidFormat

bp = Blueprint("backup", __name__)


@bp.route("/export", methods=["GET"])
def export_backup():
    """Descarga el respaldo como RESPALDO_DLS_<fecha>.json"""
    data = backup.export_data()
    filename = backup.backup_filename(prefix=current_app.config.get("BACKUP_PREFIX", "RESPALDO_DLS"))
    return Response(
        json.dumps(data, ensure_ascii=False, indent=2),
        mimetype="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@bp.route("/import", methods=["POST"])
def import_backup():
    """Importa un respaldo (body JSON o archivo en el campo 'file')"""
    if "file" in request.files:
        try:
            payload = json.load(request.files["file"])
        except ValueError:
            raise InvalidFormat("El archivo no es un JSON válido")
    else:
        payload = request.get_json(silent=True)
        if payload is None:
            raise InvalidFormat("Envíe el respaldo como JSON o en el campo 'file'")

    counts = backup.import_data(payload)
    return jsonify({"message": "Respaldo importado", "imported": counts})


@bp.route("/wipe", methods=["POST"])
def wipe():
    """Formatea el sistema. Requiere {"confirm": true}"""
    data = request.json or {}
    if data.get("confirm") is not True:
        return jsonify({"error": "Confirme el formateo con {\"confirm\": true}"}), 400

    deleted = backup.wipe_all()
    return jsonify({"message": "Sistema formateado", "deleted": deleted})
