"""
API: Autenticación
Usuario fijo y contraseña compartida desde .env, con bloqueo tras varios intentos fallidos
"""
import datetime
import logging

import jwt
from flask import Blueprint, request, jsonify, current_app

from ..utils.login_guard import LoginGuard

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)


def get_guard():
    """Un guard por app (se crea con los límites de la configuración)"""
    guard = current_app.extensions.get("login_guard")
    if guard is None:
        guard = LoginGuard(
            max_attempts=current_app.config.get("MAX_LOGIN_ATTEMPTS", 5),
            lockout_seconds=current_app.config.get("LOCKOUT_SECONDS", 300),
        )
        current_app.extensions["login_guard"] = guard
    return guard


@bp.route("/login", methods=["POST"])
def login():
    """Login con usuario y contraseña de la configuración"""
    data = request.json or {}
    username = str(data.get("username", "")).strip().lower()
    password = str(data.get("password", ""))

    guard = get_guard()
    key = request.remote_addr or "local"

    remaining = guard.remaining_lock(key)
    if remaining:
        return jsonify({
            "error": f"Demasiados intentos. Intente de nuevo en {remaining} segundos",
            "retry_after": remaining,
        }), 429

    expected_username = current_app.config.get("APP_USERNAME", "").strip().lower()
    expected_password = current_app.config.get("APP_PASSWORD")

    if username == expected_username and password == expected_password:
        guard.reset(key)
        token = jwt.encode(
            {
                "username": username,
                "exp": datetime.datetime.now(datetime.timezone.utc)
                + datetime.timedelta(days=current_app.config.get("TOKEN_DAYS", 7)),
            },
            current_app.config.get("SECRET_KEY"),
            algorithm="HS256",
        )
        logger.info("🔓 Acceso concedido a %s", username)
        return jsonify({"token": token, "user": {"username": username}})

    attempts_left = guard.register_failure(key)
    logger.warning("🔒 Intento de acceso fallido desde %s", key)
    if attempts_left == 0:
        return jsonify({
            "error": "Demasiados intentos fallidos. Acceso bloqueado temporalmente",
            "retry_after": current_app.config.get("LOCKOUT_SECONDS", 300),
        }), 429
    return jsonify({
        "error": "Usuario o contraseña incorrectos",
        "attempts_left": attempts_left,
    }), 401


@bp.route("/verify", methods=["GET"])
def verify():
    """Verifica si el token es válido"""
    auth_header = request.headers.get("Authorization", "")

    if not auth_header.startswith("Bearer "):
        return jsonify({"valid": False}), 401

    token = auth_header.split(" ", 1)[1]

    try:
        payload = jwt.decode(
            token,
            current_app.config.get("SECRET_KEY"),
            algorithms=["HS256"],
        )
    except jwt.PyJWTError:
        return jsonify({"valid": False}), 401

    return jsonify({"valid": True, "user": {"username": payload["username"]}})
