from flask import Blueprint, jsonify, g

from library_app.services.auth_service import AuthService, user_public_dict
from library_app.utils.decorators import token_required
from library_app.utils.payload import request_payload

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    data = request_payload()
    user = AuthService.register(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
        phone=data.get("phone"),
    )
    return jsonify({
        "success": True,
        "message": "registration received, waiting for admin approval",
        # token sadece kayıt ve login cevabında döner
        "data": {**user_public_dict(user), "token": user.token},
    }), 201


@auth_bp.post("/login")
def login():
    data = request_payload()
    result = AuthService.login(data.get("email"), data.get("password"))
    # eski istemciler "type" alanını okuyor
    return jsonify({"success": True, "message": "login successfully", "type": result["role"], **result})


@auth_bp.put("/logout/<int:user_id>")
@token_required
def logout(user_id: int):
    AuthService.logout(g.current_user, user_id)
    return jsonify({"success": True, "message": "User logged out successfully"})


@auth_bp.get("/me")
@token_required
def me():
    return jsonify({"success": True, "data": user_public_dict(g.current_user)})
