from library_app.extensions import db


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author = db.Column(db.String(200), nullable=False, index=True)
    subject = db.Column(db.String(200), nullable=False)
    isbn = db.Column(db.String(32), nullable=False, index=True)
    rack_number = db.Column(db.String(32), nullable=False)

    # diskteki dosya adı; tam URL'e controller katmanında çevrilir
    image_url = db.Column(db.String(255), nullable=False)

    borrows = db.relationship("Borrow", back_populates="book", cascade="all, delete-orphan")
