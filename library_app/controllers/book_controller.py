# library_app/controllers/book_controller.py

from flask import Blueprint, request, jsonify, g

from library_app.errors import LibraryError
from library_app.services.book_service import BookService
from library_app.services.image_store import ImageStore
from library_app.utils.decorators import role_required
from library_app.utils.payload import request_payload

book_bp = Blueprint("books", __name__)


def book_json(b) -> dict:
    return {
        "id": b.id,
        "title": b.title,
        "author": b.author,
        "subject": b.subject,
        "isbn": b.isbn,
        "rack_number": b.rack_number,
        "image_url": ImageStore.url_for(b.image_url),
    }


@book_bp.get("")
def list_books():
    books = BookService.list_books(request.args.get("search"))
    return jsonify({"success": True, "data": [book_json(b) for b in books]})


@book_bp.get("/<int:book_id>")
def get_book(book_id: int):
    b = BookService.get_book(book_id)
    return jsonify({"success": True, "data": book_json(b)})


@book_bp.post("")
@role_required("admin")
def create_book():
    data = request_payload()
    image = request.files.get("image")

    image_ref = ImageStore.save(image) if image and image.filename else None
    try:
        b = BookService.create_book(g.current_user, data, image_ref)
    except LibraryError:
        # kayıt oluşmadıysa yüklenen dosya da kalmasın
        ImageStore.delete(image_ref)
        raise
    return jsonify({"success": True, "message": "book created successfully !", "data": book_json(b)}), 201


@book_bp.put("/<int:book_id>")
@role_required("admin")
def update_book(book_id: int):
    data = request_payload()
    image = request.files.get("image")

    BookService.get_book(book_id)
    image_ref = ImageStore.save(image) if image and image.filename else None
    try:
        b = BookService.update_book(g.current_user, book_id, data, image_ref)
    except LibraryError:
        ImageStore.delete(image_ref)
        raise
    return jsonify({"success": True, "message": "book updated successfully", "data": book_json(b)})


@book_bp.delete("/<int:book_id>")
@role_required("admin")
def delete_book(book_id: int):
    BookService.delete_book(g.current_user, book_id)
    return jsonify({"success": True, "message": "Book deleted successfully"})
