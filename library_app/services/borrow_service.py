from datetime import datetime

from flask import current_app

from library_app.errors import Conflict, LimitExceeded, NotFound
from library_app.models.borrow import Borrow, STATUS_ACTIVE
from library_app.models.user import User
from library_app.repositories import transaction
from library_app.repositories.book_repo import BookRepo
from library_app.repositories.borrow_repo import BorrowRepo
from library_app.repositories.user_repo import UserRepo
from library_app.services.auth_service import require_admin, require_self_or_admin
from library_app.utils.validators import parse_return_date


class BorrowService:
    """Borrow request lifecycle: pending -> active, or pending -> removed.

    Each check-then-write sequence runs in one transaction that starts by
    locking the borrower's user row, so two requests for the same user are
    serialized by the database.
    """

    @staticmethod
    def _max_active() -> int:
        return int(current_app.config.get("MAX_ACTIVE_BORROWS", 3))

    @staticmethod
    def _fail(exc):
        # kilidi bırak, sonra hatayı fırlat
        transaction.rollback()
        raise exc

    @staticmethod
    def request_borrow(actor: User, user_id: int, book_id: int) -> Borrow:
        require_self_or_admin(actor, user_id)

        book = BookRepo.get(book_id)
        if not book:
            BorrowService._fail(NotFound("Book does not exist!"))

        user = UserRepo.lock(user_id)
        if not user:
            BorrowService._fail(NotFound("User does not exist!"))

        if BorrowRepo.find_open(user_id, book_id):
            BorrowService._fail(Conflict("You have already borrowed this book!"))

        # sadece aktif (onaylanmış) ödünçler limite sayılır
        if BorrowRepo.count_active(user_id) >= BorrowService._max_active():
            BorrowService._fail(LimitExceeded("You have the maximum number of borrowed books!"))

        borrow = BorrowRepo.create(user_id, book_id, now=datetime.utcnow())
        current_app.logger.info(f"[borrow] requested borrow_id={borrow.id} user_id={user_id} book_id={book_id}")
        return borrow

    @staticmethod
    def list_pending_requests(actor: User) -> list[dict]:
        require_admin(actor)
        return [
            {
                "id": b.id,
                "user_id": b.user_id,
                "book_id": b.book_id,
                "status": b.status,
                "borrow_date": b.borrow_date.isoformat() if b.borrow_date else None,
                "returnDate": b.return_date.isoformat() if b.return_date else None,
                "email": u.email,
                "name": u.name,
                "title": book.title,
            }
            for b, u, book in BorrowRepo.list_pending_with_details()
        ]

    @staticmethod
    def accept_request(actor: User, borrow_id: int, return_date) -> Borrow:
        require_admin(actor)
        due = parse_return_date(return_date)

        borrow = BorrowRepo.get(borrow_id)
        if not borrow:
            raise NotFound("Borrow request not found!")

        # kilit alındıktan sonra satır tekrar okunur, arada silinmiş olabilir
        UserRepo.lock(borrow.user_id)
        borrow = BorrowRepo.reload(borrow_id)
        if not borrow:
            BorrowService._fail(NotFound("Borrow request not found!"))

        if borrow.status == STATUS_ACTIVE:
            BorrowService._fail(Conflict("Borrow request already accepted"))

        # talep anındaki kontrolden bağımsız olarak tekrar sayılır
        if BorrowRepo.count_active(borrow.user_id) >= BorrowService._max_active():
            BorrowService._fail(LimitExceeded("the user has maximum number of books."))

        borrow.status = STATUS_ACTIVE
        borrow.return_date = due
        BorrowRepo.commit()
        current_app.logger.info(f"[borrow] accepted borrow_id={borrow.id} due={due.isoformat()}")
        return borrow

    @staticmethod
    def reject_request(actor: User, borrow_id: int):
        require_admin(actor)

        borrow = BorrowRepo.get(borrow_id)
        if not borrow:
            raise NotFound("borrow request not found !")

        UserRepo.lock(borrow.user_id)
        borrow = BorrowRepo.reload(borrow_id)
        if not borrow:
            BorrowService._fail(NotFound("borrow request not found !"))

        if borrow.status == STATUS_ACTIVE:
            BorrowService._fail(Conflict("only pending borrow requests can be rejected"))

        BorrowRepo.delete(borrow)
        current_app.logger.info(f"[borrow] rejected borrow_id={borrow_id}")

    @staticmethod
    def list_active_books(actor: User, user_id: int):
        require_self_or_admin(actor, user_id)
        return BorrowRepo.list_active_books(user_id)
