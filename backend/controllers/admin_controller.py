from flask import Blueprint, jsonify, request

from controllers.helpers import parse_cursor_params
from security import ValidationError, jwt_required, require_admin
from services import admin_service

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/users")
@jwt_required()
@require_admin
def list_users():
    cursor, size = parse_cursor_params()
    return jsonify(admin_service.list_users(cursor, size))


@admin_bp.get("/audit-logs")
@jwt_required()
@require_admin
def list_audit_logs():
    cursor, size = parse_cursor_params()
    user_id_raw = request.args.get("userId")
    user_id = None
    if user_id_raw:
        try:
            user_id = int(user_id_raw)
        except ValueError:
            raise ValidationError("userId must be an integer", details={"field": "userId"})
    page = admin_service.list_audit_logs(
        cursor, size, user_id=user_id, event_type=request.args.get("eventType")
    )
    return jsonify(page)
