from library_app.extensions import db

STATUS_PENDING = 0
STATUS_ACTIVE = 1

OFFLINE = 0
ONLINE = 1

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=False)

    # kayıtta bir kez üretilir, login'de değişmez
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)

    status = db.Column(db.Integer, nullable=False, default=STATUS_PENDING)  # 0 pending / 1 active
    online_status = db.Column(db.Integer, nullable=False, default=OFFLINE)
    type = db.Column(db.String(20), nullable=False, default=ROLE_USER)  # admin / user

    borrows = db.relationship("Borrow", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.type == ROLE_ADMIN

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE
