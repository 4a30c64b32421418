from datetime import datetime

from library_app.models.book import Book
from library_app.models.borrow import Borrow, STATUS_PENDING, STATUS_ACTIVE
from library_app.models.user import User
from library_app.extensions import db
from library_app.repositories import transaction


class BorrowRepo:
    @staticmethod
    def get(borrow_id: int):
        return db.session.get(Borrow, borrow_id)

    @staticmethod
    def reload(borrow_id: int):
        # kilitten sonra satırın güncel halini okur
        return Borrow.query.filter_by(id=borrow_id).populate_existing().first()

    @staticmethod
    def find_open(user_id: int, book_id: int):
        """Pending or active request for the (user, book) pair, if any."""
        return Borrow.query.filter(
            Borrow.user_id == user_id,
            Borrow.book_id == book_id,
            Borrow.status.in_((STATUS_PENDING, STATUS_ACTIVE)),
        ).first()

    @staticmethod
    def count_active(user_id: int) -> int:
        return Borrow.query.filter_by(user_id=user_id, status=STATUS_ACTIVE).count()

    @staticmethod
    def list_pending_with_details():
        return (
            db.session.query(Borrow, User, Book)
            .join(User, User.id == Borrow.user_id)
            .join(Book, Book.id == Borrow.book_id)
            .filter(Borrow.status == STATUS_PENDING)
            .all()
        )

    @staticmethod
    def list_active_books(user_id: int):
        return (
            Book.query
            .join(Borrow, Borrow.book_id == Book.id)
            .filter(Borrow.user_id == user_id, Borrow.status == STATUS_ACTIVE)
            .all()
        )

    @staticmethod
    def create(user_id: int, book_id: int, now: datetime | None = None):
        borrow = Borrow(
            user_id=user_id,
            book_id=book_id,
            status=STATUS_PENDING,
            borrow_date=now or datetime.utcnow(),
        )
        db.session.add(borrow)
        transaction.commit()
        return borrow

    @staticmethod
    def commit():
        transaction.commit()

    @staticmethod
    def delete(borrow: Borrow):
        db.session.delete(borrow)
        transaction.commit()
