import hmac
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from hokies.version import API_PREFIX
from hokies.utils import (
    error,
    validate_schema,
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)
from hokies.schemas.auth import LoginRequest, RefreshRequest

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix=f"{API_PREFIX}/auth")

ADMIN_SUBJECT = "admin"


def _token_pair(subject, role):
    return {
        "status": "success",
        "access_token": create_access_token(subject, role),
        "refresh_token": create_refresh_token(subject, role),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
    }


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many logins from this IP",
)
@validate_schema(LoginRequest)
def login():
    """
    Admin login
    ---
    tags: [Auth]
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            password: {type: string}
    responses:
      200: {description: Token pair}
      401: {description: Wrong password}
    """
    data: LoginRequest = request.validated_data
    expected = current_app.config.get("ADMIN_PASSWORD") or ""
    if not expected or not hmac.compare_digest(data.password.encode(), expected.encode()):
        logger.warning("Admin login failed from %s", get_remote_address())
        return error("Invalid password", status=401)
    logger.info("Admin login succeeded")
    return jsonify(_token_pair(ADMIN_SUBJECT, "admin")), 200


@auth_bp.route("/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh_tokens():
    data: RefreshRequest = request.validated_data
    try:
        payload = decode_token(data.refresh_token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)
    return jsonify(_token_pair(payload["sub"], payload.get("role") or "")), 200
