"""Shared fixtures: a fresh app + SQLite file per test, and small data helpers."""

import itertools
import os
from contextlib import nullcontext
from types import SimpleNamespace

import pytest
from flask import has_app_context

from library_app import create_app
from library_app.config import TestConfig
from library_app.extensions import db
from library_app.models.book import Book
from library_app.models.borrow import Borrow, STATUS_ACTIVE as BORROW_ACTIVE
from library_app.models.user import User, STATUS_ACTIVE
from library_app.services.auth_service import AuthService

PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path):
    app = create_app(
        TestConfig,
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'library_test.db'}",
        UPLOAD_FOLDER=str(tmp_path / "upload"),
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    """App context for tests that call services directly."""
    with app.app_context():
        yield


def _context(app):
    return nullcontext() if has_app_context() else app.app_context()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(active=True, admin=False, email=None, password=PASSWORD):
        n = next(counter)
        name = f"{'admin' if admin else 'user'}{n}"
        email = email or f"{name}@example.com"
        with _context(app):
            if admin:
                user = AuthService.create_admin(name, email, password, "+905551112233")
            else:
                user = AuthService.register(name, email, password, "+905551112233")
                if active:
                    user.status = STATUS_ACTIVE
                    db.session.commit()
            return SimpleNamespace(id=user.id, token=user.token, email=user.email, password=password)

    return _make


@pytest.fixture
def make_book(app):
    counter = itertools.count(1)

    def _make(title=None, author="Some Author", subject="Science", isbn=None, rack_number="R1", image=None):
        n = next(counter)
        image = image or f"cover_{n}.png"
        with _context(app):
            folder = app.config["UPLOAD_FOLDER"]
            os.makedirs(folder, exist_ok=True)
            with open(os.path.join(folder, image), "wb") as fh:
                fh.write(b"img")
            book = Book(
                title=title or f"Book title {n}",
                author=author,
                subject=subject,
                isbn=isbn or f"{9780000000000 + n}",
                rack_number=rack_number,
                image_url=image,
            )
            db.session.add(book)
            db.session.commit()
            return book.id

    return _make


@pytest.fixture
def make_active_borrow(app):
    def _make(user_id, book_id):
        with _context(app):
            borrow = Borrow(user_id=user_id, book_id=book_id, status=BORROW_ACTIVE)
            db.session.add(borrow)
            db.session.commit()
            return borrow.id

    return _make


def auth(user) -> dict:
    return {"Authorization": f"Bearer {user.token}"}


def load_user(ns) -> User:
    return db.session.get(User, ns.id)
