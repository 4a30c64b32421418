from datetime import datetime
from library_app.extensions import db

STATUS_PENDING = 0
STATUS_ACTIVE = 1


class Borrow(db.Model):
    __tablename__ = "borrow"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    status = db.Column(db.Integer, nullable=False, default=STATUS_PENDING)  # 0 pending / 1 active
    borrow_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # sadece kabul edilince dolar
    return_date = db.Column("returnDate", db.Date, nullable=True)

    user = db.relationship("User", back_populates="borrows")
    book = db.relationship("Book", back_populates="borrows")
