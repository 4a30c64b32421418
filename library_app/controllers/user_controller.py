from flask import Blueprint, jsonify, g

from library_app.services.auth_service import AuthService, user_public_dict
from library_app.utils.decorators import role_required

user_bp = Blueprint("users", __name__)


@user_bp.get("/pending")
@role_required("admin")
def pending_users():
    users = AuthService.list_pending_users(g.current_user)
    return jsonify({
        "success": True,
        "message": "these are users who registered",
        "data": [user_public_dict(u) for u in users],
    })


@user_bp.put("/<int:user_id>/approve")
@role_required("admin")
def approve_user(user_id: int):
    user = AuthService.approve_user(g.current_user, user_id)
    return jsonify({"success": True, "message": "user status updated successfully", "data": {"id": user.id}})


@user_bp.delete("/<int:user_id>")
@role_required("admin")
def reject_user(user_id: int):
    AuthService.reject_user(g.current_user, user_id)
    return jsonify({"success": True, "message": "user deleted successfully"})
