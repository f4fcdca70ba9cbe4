from flask import Blueprint, jsonify

from controllers.helpers import current_user_id, json_body, parse_cursor_params
from security import jwt_required
from services import memoir_service

memoirs_bp = Blueprint("memoirs", __name__, url_prefix="/api/memoirs")


@memoirs_bp.post("")
@jwt_required()
def create_memoir():
    result, status = memoir_service.create_memoir(current_user_id(), json_body())
    return jsonify(result), status


@memoirs_bp.get("")
@jwt_required()
def list_memoirs():
    cursor, size = parse_cursor_params()
    return jsonify(memoir_service.list_memoirs(current_user_id(), cursor, size))


@memoirs_bp.get("/<int:memoir_id>")
@jwt_required()
def get_memoir(memoir_id: int):
    return jsonify(memoir_service.get_memoir(current_user_id(), memoir_id))


@memoirs_bp.patch("/<int:memoir_id>")
@jwt_required()
def update_memoir(memoir_id: int):
    result, status = memoir_service.update_memoir(current_user_id(), memoir_id, json_body())
    return jsonify(result), status


@memoirs_bp.delete("/<int:memoir_id>")
@jwt_required()
def delete_memoir(memoir_id: int):
    result, status = memoir_service.delete_memoir(current_user_id(), memoir_id)
    return jsonify(result), status
