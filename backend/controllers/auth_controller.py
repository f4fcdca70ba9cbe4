from flask import Blueprint, jsonify

from controllers.helpers import get_token_provider, json_body
from services import auth_service

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/signup")
def signup():
    result, status = auth_service.signup(json_body())
    return jsonify(result), status


@auth_bp.post("/login")
def login():
    result, status = auth_service.login(json_body(), token_provider=get_token_provider())
    return jsonify(result), status
