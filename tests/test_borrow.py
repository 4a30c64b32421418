from datetime import date

import pytest
from sqlalchemy import text

from library_app.errors import Conflict, Forbidden, LimitExceeded, NotFound, ValidationError
from library_app.models.borrow import Borrow, STATUS_ACTIVE, STATUS_PENDING
from library_app.extensions import db
from library_app.repositories.user_repo import UserRepo
from library_app.services.borrow_service import BorrowService

from conftest import auth, load_user

DUE = "2026-11-30"


@pytest.fixture
def admin(ctx, make_user):
    return load_user(make_user(admin=True))


@pytest.fixture
def member(ctx, make_user):
    return load_user(make_user())


# -----------------------------
# request
# -----------------------------
def test_request_creates_pending_record(admin, member, make_book):
    book_id = make_book()

    borrow = BorrowService.request_borrow(member, member.id, book_id)

    assert borrow.status == STATUS_PENDING
    assert borrow.user_id == member.id
    assert borrow.book_id == book_id
    assert borrow.borrow_date is not None
    assert borrow.return_date is None


def test_request_unknown_book_or_user(admin, member, make_book):
    with pytest.raises(NotFound):
        BorrowService.request_borrow(member, member.id, 999)
    with pytest.raises(NotFound):
        BorrowService.request_borrow(admin, 999, make_book())


def test_duplicate_request_conflicts(member, make_book):
    book_id = make_book()
    BorrowService.request_borrow(member, member.id, book_id)
    with pytest.raises(Conflict):
        BorrowService.request_borrow(member, member.id, book_id)
    assert Borrow.query.count() == 1


def test_request_for_active_loan_conflicts(admin, member, make_book):
    book_id = make_book()
    borrow = BorrowService.request_borrow(member, member.id, book_id)
    BorrowService.accept_request(admin, borrow.id, DUE)
    with pytest.raises(Conflict):
        BorrowService.request_borrow(member, member.id, book_id)


def test_request_again_after_reject(admin, member, make_book):
    book_id = make_book()
    borrow = BorrowService.request_borrow(member, member.id, book_id)
    BorrowService.reject_request(admin, borrow.id)

    again = BorrowService.request_borrow(member, member.id, book_id)
    assert again.status == STATUS_PENDING


def test_request_blocked_when_user_holds_three_active(member, make_book, make_active_borrow):
    for _ in range(3):
        make_active_borrow(member.id, make_book())
    with pytest.raises(LimitExceeded):
        BorrowService.request_borrow(member, member.id, make_book())


def test_pending_requests_do_not_count_toward_cap(member, make_book):
    for _ in range(5):
        BorrowService.request_borrow(member, member.id, make_book())
    assert Borrow.query.filter_by(user_id=member.id, status=STATUS_PENDING).count() == 5


def test_request_for_someone_else_is_forbidden(ctx, member, make_user, make_book):
    other = make_user()
    with pytest.raises(Forbidden):
        BorrowService.request_borrow(member, other.id, make_book())


# -----------------------------
# accept
# -----------------------------
def test_accept_sets_active_and_due_date(admin, member, make_book):
    borrow = BorrowService.request_borrow(member, member.id, make_book())

    accepted = BorrowService.accept_request(admin, borrow.id, DUE)

    assert accepted.status == STATUS_ACTIVE
    assert accepted.return_date == date(2026, 11, 30)


def test_fourth_request_cannot_be_accepted(admin, member, make_book):
    pending = [BorrowService.request_borrow(member, member.id, make_book()) for _ in range(4)]

    for b in pending[:3]:
        BorrowService.accept_request(admin, b.id, DUE)

    assert len(BorrowService.list_active_books(member, member.id)) == 3
    with pytest.raises(LimitExceeded):
        BorrowService.accept_request(admin, pending[3].id, DUE)
    assert pending[3].status == STATUS_PENDING


def test_accept_rechecks_cap_at_accept_time(admin, member, make_book, make_active_borrow):
    pending = BorrowService.request_borrow(member, member.id, make_book())
    for _ in range(3):
        make_active_borrow(member.id, make_book())

    with pytest.raises(LimitExceeded):
        BorrowService.accept_request(admin, pending.id, DUE)


def test_accept_unknown_request(admin):
    with pytest.raises(NotFound):
        BorrowService.accept_request(admin, 777, DUE)


def test_accept_bad_date(admin, member, make_book):
    borrow = BorrowService.request_borrow(member, member.id, make_book())
    with pytest.raises(ValidationError):
        BorrowService.accept_request(admin, borrow.id, "next tuesday")
    with pytest.raises(ValidationError):
        BorrowService.accept_request(admin, borrow.id, None)
    for value in ("20261130", "2026-W48-1", "2026-11-31", "\u0662\u0660\u0662\u0666-11-30"):
        with pytest.raises(ValidationError):
            BorrowService.accept_request(admin, borrow.id, value)


def test_accept_twice_conflicts(admin, member, make_book):
    borrow = BorrowService.request_borrow(member, member.id, make_book())
    BorrowService.accept_request(admin, borrow.id, DUE)
    with pytest.raises(Conflict):
        BorrowService.accept_request(admin, borrow.id, DUE)


def test_accept_needs_admin(member, make_book):
    borrow = BorrowService.request_borrow(member, member.id, make_book())
    with pytest.raises(Forbidden):
        BorrowService.accept_request(member, borrow.id, DUE)


def _delete_row_while_locking(monkeypatch, borrow_id):
    original_lock = UserRepo.lock

    def lock_after_delete(user_id):
        # başka bir işlem kaydı kilitten hemen önce silmiş gibi
        db.session.execute(text("DELETE FROM borrow WHERE id = :id"), {"id": borrow_id})
        return original_lock(user_id)

    monkeypatch.setattr(UserRepo, "lock", staticmethod(lock_after_delete))


def test_accept_request_removed_before_lock_is_not_found(admin, member, make_book, monkeypatch):
    borrow = BorrowService.request_borrow(member, member.id, make_book())
    borrow_id = borrow.id
    _delete_row_while_locking(monkeypatch, borrow_id)

    with pytest.raises(NotFound):
        BorrowService.accept_request(admin, borrow_id, DUE)


def test_reject_request_removed_before_lock_is_not_found(admin, member, make_book, monkeypatch):
    borrow = BorrowService.request_borrow(member, member.id, make_book())
    borrow_id = borrow.id
    _delete_row_while_locking(monkeypatch, borrow_id)

    with pytest.raises(NotFound):
        BorrowService.reject_request(admin, borrow_id)


# -----------------------------
# reject
# -----------------------------
def test_reject_twice_reports_not_found(admin, member, make_book):
    borrow = BorrowService.request_borrow(member, member.id, make_book())
    borrow_id = borrow.id

    BorrowService.reject_request(admin, borrow_id)
    with pytest.raises(NotFound):
        BorrowService.reject_request(admin, borrow_id)


def test_reject_active_loan_conflicts(admin, member, make_book):
    borrow = BorrowService.request_borrow(member, member.id, make_book())
    BorrowService.accept_request(admin, borrow.id, DUE)
    with pytest.raises(Conflict):
        BorrowService.reject_request(admin, borrow.id)


# -----------------------------
# listings
# -----------------------------
def test_pending_list_is_enriched(admin, member, make_book):
    book_id = make_book(title="Enriched title")
    borrow = BorrowService.request_borrow(member, member.id, book_id)

    rows = BorrowService.list_pending_requests(admin)

    assert len(rows) == 1
    row = rows[0]
    assert row["id"] == borrow.id
    assert row["email"] == member.email
    assert row["name"] == member.name
    assert row["title"] == "Enriched title"
    assert row["returnDate"] is None


def test_pending_list_empty(admin):
    assert BorrowService.list_pending_requests(admin) == []


def test_active_books_for_user(admin, member, make_book):
    active_book = make_book(title="Checked out")
    pending_book = make_book(title="Still waiting")
    b = BorrowService.request_borrow(member, member.id, active_book)
    BorrowService.request_borrow(member, member.id, pending_book)
    BorrowService.accept_request(admin, b.id, DUE)

    books = BorrowService.list_active_books(member, member.id)
    assert [x.id for x in books] == [active_book]
    assert BorrowService.list_active_books(admin, member.id)[0].title == "Checked out"


def test_active_books_empty_and_private(ctx, member, make_user):
    other = make_user()
    assert BorrowService.list_active_books(member, member.id) == []
    with pytest.raises(Forbidden):
        BorrowService.list_active_books(member, other.id)


# -----------------------------
# HTTP
# -----------------------------
def test_http_borrow_flow(client, make_user, make_book):
    admin = make_user(admin=True)
    user = make_user()
    book_id = make_book(title="Flow book")

    res = client.get("/borrow/pending", headers=auth(admin))
    assert res.status_code == 200
    assert res.get_json()["data"] == []

    res = client.post(f"/borrow/{book_id}", headers=auth(user))
    assert res.status_code == 201
    borrow_id = res.get_json()["data"]["id"]

    res = client.post(f"/borrow/{book_id}", headers=auth(user))
    assert res.status_code == 409
    assert res.get_json()["code"] == "conflict"

    res = client.get("/borrow/pending", headers=auth(admin))
    assert [r["id"] for r in res.get_json()["data"]] == [borrow_id]

    res = client.get(f"/borrow/active/{user.id}", headers=auth(user))
    assert res.status_code == 200
    assert res.get_json()["data"] == []

    res = client.put(f"/borrow/{borrow_id}/accept", json={"returnDate": DUE}, headers=auth(admin))
    assert res.status_code == 200
    assert res.get_json()["data"]["returnDate"] == DUE

    res = client.get(f"/borrow/active/{user.id}", headers=auth(user))
    assert [b["title"] for b in res.get_json()["data"]] == ["Flow book"]


def test_http_reject_and_missing(client, make_user, make_book):
    admin = make_user(admin=True)
    user = make_user()
    borrow_id = client.post(f"/borrow/{make_book()}", headers=auth(user)).get_json()["data"]["id"]

    assert client.delete(f"/borrow/{borrow_id}/reject", headers=auth(admin)).status_code == 200
    assert client.delete(f"/borrow/{borrow_id}/reject", headers=auth(admin)).status_code == 404
    assert client.put(f"/borrow/{borrow_id}/accept", json={"returnDate": DUE}, headers=auth(admin)).status_code == 404
    assert client.post("/borrow/999", headers=auth(user)).status_code == 404


def test_http_accept_limit(client, make_user, make_book, make_active_borrow):
    admin = make_user(admin=True)
    user = make_user()
    borrow_id = client.post(f"/borrow/{make_book()}", headers=auth(user)).get_json()["data"]["id"]
    for _ in range(3):
        make_active_borrow(user.id, make_book())

    res = client.put(f"/borrow/{borrow_id}/accept", json={"returnDate": DUE}, headers=auth(admin))
    assert res.status_code == 400
    assert res.get_json()["code"] == "limit_exceeded"


def test_http_borrow_routes_need_rights(client, make_user, make_book):
    user = make_user()
    other = make_user()
    assert client.post(f"/borrow/{make_book()}").status_code == 401
    assert client.get("/borrow/pending", headers=auth(user)).status_code == 403
    assert client.get(f"/borrow/active/{other.id}", headers=auth(user)).status_code == 403


def test_http_accept_non_object_json_body(client, make_user, make_book):
    admin = make_user(admin=True)
    user = make_user()
    borrow_id = client.post(f"/borrow/{make_book()}", headers=auth(user)).get_json()["data"]["id"]

    res = client.put(f"/borrow/{borrow_id}/accept", json=[DUE], headers=auth(admin))
    assert res.status_code == 400
    assert res.get_json()["code"] == "validation_error"
