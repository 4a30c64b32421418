from sqlalchemy import func, or_

from library_app.models.book import Book
from library_app.extensions import db
from library_app.repositories import transaction

SEARCHABLE_COLUMNS = (Book.title, Book.author, Book.subject, Book.isbn, Book.rack_number)


class BookRepo:
    @staticmethod
    def list_all():
        return Book.query.order_by(Book.isbn.asc(), Book.rack_number.asc()).all()

    @staticmethod
    def search(term: str):
        needle = term.lower()
        return Book.query.filter(
            or_(*[func.lower(col).contains(needle, autoescape=True) for col in SEARCHABLE_COLUMNS])
        ).all()

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        transaction.commit()
        return book

    @staticmethod
    def update():
        transaction.commit()

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)
        transaction.commit()
