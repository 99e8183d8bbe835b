import logging
from flask import Blueprint, request, g
from hokies.utils import ok, auth_required, create_access_token, create_refresh_token


test_support_bp = Blueprint("test_support_bp", __name__)


@test_support_bp.route("/__ok", methods=["GET"])
def __ok():
    return ok({"ping": "pong"})


@test_support_bp.route("/__boom", methods=["GET"])
def __boom():
    raise RuntimeError("boom")


@test_support_bp.route("/__log", methods=["GET"])
def __log():
    logging.getLogger(__name__).info("test log line")
    return ok({"logged": True})


@test_support_bp.route("/__auth/login_stub", methods=["POST"])
def __login_stub():
    j = request.get_json() or {}
    subject = j.get("subject", "test")
    role = j.get("role", "admin")
    return ok({
        "access": create_access_token(subject, role),
        "refresh": create_refresh_token(subject, role),
    })


@test_support_bp.route("/__auth/whoami", methods=["GET"])
@auth_required
def __whoami():
    return ok({"subject": g.subject, "role": g.role})
