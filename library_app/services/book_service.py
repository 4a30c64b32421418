from flask import current_app

from library_app.errors import NotFound, ValidationError
from library_app.models.book import Book
from library_app.models.user import User
from library_app.repositories.book_repo import BookRepo
from library_app.services.auth_service import require_admin
from library_app.services.image_store import ImageStore
from library_app.utils.validators import validate_book_fields


class BookService:
    @staticmethod
    def list_books(search: str | None = None):
        term = (search or "").strip()
        if not term:
            return BookRepo.list_all()
        return BookRepo.search(term)

    @staticmethod
    def get_book(book_id: int):
        book = BookRepo.get(book_id)
        if not book:
            raise NotFound("book not found !")
        return book

    @staticmethod
    def create_book(actor: User, data: dict, image_ref: str | None) -> Book:
        require_admin(actor)
        fields = validate_book_fields(data)
        if not image_ref:
            raise ValidationError("Image is Required", errors=[{"field": "image", "msg": "Image is Required"}])

        book = Book(image_url=image_ref, **fields)
        BookRepo.create(book)
        current_app.logger.info(f"[books] created book_id={book.id}")
        return book

    @staticmethod
    def update_book(actor: User, book_id: int, data: dict, image_ref: str | None = None) -> Book:
        require_admin(actor)
        book = BookService.get_book(book_id)
        fields = validate_book_fields(data, partial=True)

        for k, v in fields.items():
            setattr(book, k, v)

        old_image = None
        if image_ref:
            old_image = book.image_url
            book.image_url = image_ref

        BookRepo.update()

        # eski görsel ancak yeni referans kaydedildikten sonra silinir
        if old_image and old_image != image_ref:
            ImageStore.delete(old_image)

        current_app.logger.info(f"[books] updated book_id={book.id} fields={sorted(fields)}")
        return book

    @staticmethod
    def delete_book(actor: User, book_id: int):
        require_admin(actor)
        book = BookService.get_book(book_id)
        BookRepo.delete(book)
        current_app.logger.info(f"[books] deleted book_id={book_id}")
