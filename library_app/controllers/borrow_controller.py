from flask import Blueprint, jsonify, g

from library_app.controllers.book_controller import book_json
from library_app.services.borrow_service import BorrowService
from library_app.utils.decorators import role_required, token_required
from library_app.utils.payload import request_payload

borrow_bp = Blueprint("borrow", __name__)


def borrow_json(b) -> dict:
    return {
        "id": b.id,
        "user_id": b.user_id,
        "book_id": b.book_id,
        "status": b.status,
        "borrow_date": b.borrow_date.isoformat() if b.borrow_date else None,
        "returnDate": b.return_date.isoformat() if b.return_date else None,
    }


@borrow_bp.post("/<int:book_id>")
@token_required
def request_borrow(book_id: int):
    b = BorrowService.request_borrow(g.current_user, g.current_user.id, book_id)
    return jsonify({"success": True, "message": "Borrow request sent successfully!", "data": borrow_json(b)}), 201


@borrow_bp.get("/pending")
@role_required("admin")
def pending_requests():
    rows = BorrowService.list_pending_requests(g.current_user)
    if not rows:
        return jsonify({"success": True, "message": "Borrow requests not found!", "data": []})
    return jsonify({"success": True, "data": rows})


@borrow_bp.put("/<int:borrow_id>/accept")
@role_required("admin")
def accept_request(borrow_id: int):
    data = request_payload()
    b = BorrowService.accept_request(g.current_user, borrow_id, data.get("returnDate"))
    return jsonify({"success": True, "message": "Borrow request accepted successfully", "data": borrow_json(b)})


@borrow_bp.delete("/<int:borrow_id>/reject")
@role_required("admin")
def reject_request(borrow_id: int):
    BorrowService.reject_request(g.current_user, borrow_id)
    return jsonify({"success": True, "message": "borrow request rejected successfully"})


@borrow_bp.get("/active/<int:user_id>")
@token_required
def active_books(user_id: int):
    books = BorrowService.list_active_books(g.current_user, user_id)
    if not books:
        return jsonify({"success": True, "message": "there is no borrowed books !", "data": []})
    return jsonify({"success": True, "data": [book_json(b) for b in books]})
