from flask import Blueprint, jsonify

from controllers.helpers import current_user_id, parse_date_arg, parse_int_arg
from security import jwt_required
from services import summary_service

summaries_bp = Blueprint("summaries", __name__, url_prefix="/api/summaries")


@summaries_bp.get("/daily")
@jwt_required()
def get_daily():
    return jsonify(summary_service.get_daily(current_user_id(), parse_date_arg("date")))


@summaries_bp.post("/daily")
@jwt_required()
def rebuild_daily():
    row = summary_service.rebuild_daily(current_user_id(), parse_date_arg("date"))
    return jsonify(row.to_dict()), 200


@summaries_bp.get("/weekly")
@jwt_required()
def get_weekly():
    return jsonify(summary_service.get_weekly(current_user_id(), parse_date_arg("weekStart")))


@summaries_bp.post("/weekly")
@jwt_required()
def rebuild_weekly():
    row = summary_service.rebuild_weekly(current_user_id(), parse_date_arg("weekStart"))
    return jsonify(row.to_dict()), 200


@summaries_bp.get("/monthly")
@jwt_required()
def get_monthly():
    payload = summary_service.get_monthly(
        current_user_id(), parse_int_arg("year"), parse_int_arg("month")
    )
    return jsonify(payload)


@summaries_bp.post("/monthly")
@jwt_required()
def rebuild_monthly():
    row = summary_service.rebuild_monthly(
        current_user_id(), parse_int_arg("year"), parse_int_arg("month")
    )
    return jsonify(row.to_dict()), 200
