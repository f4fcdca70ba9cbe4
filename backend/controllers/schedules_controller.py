from flask import Blueprint, jsonify

from controllers.helpers import (
    current_user_id,
    json_body,
    parse_cursor_params,
    parse_datetime_arg,
    parse_enum_arg,
)
from enums import ScheduleCategory, ScheduleStatus
from security import jwt_required
from services import schedule_service

schedules_bp = Blueprint("schedules", __name__, url_prefix="/api/schedules")


@schedules_bp.post("")
@jwt_required()
def create_schedule():
    result, status = schedule_service.create_schedule(current_user_id(), json_body())
    return jsonify(result), status


@schedules_bp.get("")
@jwt_required()
def list_schedules():
    cursor, size = parse_cursor_params()
    page = schedule_service.list_schedules(
        current_user_id(),
        cursor,
        size,
        start_from=parse_datetime_arg("from"),
        start_to=parse_datetime_arg("to"),
        status=parse_enum_arg("status", ScheduleStatus),
        category=parse_enum_arg("category", ScheduleCategory),
    )
    return jsonify(page)


@schedules_bp.get("/<int:schedule_id>")
@jwt_required()
def get_schedule(schedule_id: int):
    return jsonify(schedule_service.get_schedule(current_user_id(), schedule_id))


@schedules_bp.patch("/<int:schedule_id>")
@jwt_required()
def update_schedule(schedule_id: int):
    result, status = schedule_service.update_schedule(current_user_id(), schedule_id, json_body())
    return jsonify(result), status


@schedules_bp.patch("/<int:schedule_id>/status")
@jwt_required()
def change_status(schedule_id: int):
    result, status = schedule_service.change_status(current_user_id(), schedule_id, json_body())
    return jsonify(result), status


@schedules_bp.delete("/<int:schedule_id>")
@jwt_required()
def delete_schedule(schedule_id: int):
    result, status = schedule_service.delete_schedule(current_user_id(), schedule_id)
    return jsonify(result), status
