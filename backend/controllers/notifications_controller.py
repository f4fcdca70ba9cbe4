from flask import Blueprint, jsonify

from controllers.helpers import current_user_id, json_body, parse_cursor_params, query_flag
from security import jwt_required
from services import notification_service

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.post("")
@jwt_required()
def create_notification():
    result, status = notification_service.create_notification(current_user_id(), json_body())
    return jsonify(result), status


@notifications_bp.get("")
@jwt_required()
def list_notifications():
    cursor, size = parse_cursor_params()
    page = notification_service.list_notifications(
        current_user_id(), cursor, size, unread_only=query_flag("unread")
    )
    return jsonify(page)


@notifications_bp.get("/unread-count")
@jwt_required()
def unread_count():
    return jsonify(notification_service.unread_count(current_user_id()))


@notifications_bp.patch("/check-all")
@jwt_required()
def check_all():
    result, status = notification_service.check_all(current_user_id())
    return jsonify(result), status


@notifications_bp.patch("/<int:notification_id>/check")
@jwt_required()
def check(notification_id: int):
    result, status = notification_service.check(current_user_id(), notification_id)
    return jsonify(result), status


@notifications_bp.delete("/<int:notification_id>")
@jwt_required()
def delete_notification(notification_id: int):
    result, status = notification_service.delete_notification(current_user_id(), notification_id)
    return jsonify(result), status
