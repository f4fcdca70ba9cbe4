from flask import Blueprint, jsonify

from controllers.helpers import current_user_id, json_body, parse_cursor_params
from security import jwt_required
from services import deepwork_service

deepwork_bp = Blueprint("deep_work", __name__, url_prefix="/api/deep-work")


@deepwork_bp.post("/sessions")
@jwt_required()
def start_session():
    result, status = deepwork_service.start_session(current_user_id(), json_body())
    return jsonify(result), status


@deepwork_bp.get("/sessions")
@jwt_required()
def list_sessions():
    cursor, size = parse_cursor_params()
    return jsonify(deepwork_service.list_sessions(current_user_id(), cursor, size))


@deepwork_bp.get("/sessions/<int:session_id>")
@jwt_required()
def get_session(session_id: int):
    return jsonify(deepwork_service.get_session(current_user_id(), session_id))


@deepwork_bp.patch("/sessions/<int:session_id>/end")
@jwt_required()
def end_session(session_id: int):
    result, status = deepwork_service.end_session(current_user_id(), session_id, json_body())
    return jsonify(result), status


@deepwork_bp.post("/sessions/<int:session_id>/distractions")
@jwt_required()
def record_distraction(session_id: int):
    result, status = deepwork_service.record_distraction(
        current_user_id(), session_id, json_body()
    )
    return jsonify(result), status


@deepwork_bp.delete("/sessions/<int:session_id>")
@jwt_required()
def delete_session(session_id: int):
    result, status = deepwork_service.delete_session(current_user_id(), session_id)
    return jsonify(result), status
