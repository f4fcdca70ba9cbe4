from flask import Blueprint, jsonify

from controllers.helpers import current_user_id, json_body
from security import jwt_required
from services import auth_service

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/me")
@jwt_required()
def get_current_user():
    return jsonify(auth_service.get_profile(current_user_id()))


@users_bp.patch("/me")
@jwt_required()
def update_current_user():
    result, status = auth_service.update_profile(current_user_id(), json_body())
    return jsonify(result), status


@users_bp.delete("/me")
@jwt_required()
def delete_current_user():
    result, status = auth_service.delete_account(current_user_id())
    return jsonify(result), status
