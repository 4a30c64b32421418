from library_app.models.user import User, STATUS_PENDING
from library_app.extensions import db
from library_app.repositories import transaction


class UserRepo:
    @staticmethod
    def get_by_email(email: str):
        return User.query.filter_by(email=email).first()

    @staticmethod
    def get_by_id(user_id: int):
        return db.session.get(User, user_id)

    @staticmethod
    def get_by_token(token: str):
        return User.query.filter_by(token=token).first()

    @staticmethod
    def lock(user_id: int):
        # aynı kullanıcı için check-then-write adımlarını sıraya sokar
        return User.query.filter_by(id=user_id).with_for_update().first()

    @staticmethod
    def list_pending():
        return User.query.filter_by(status=STATUS_PENDING).order_by(User.id.asc()).all()

    @staticmethod
    def create(user: User):
        db.session.add(user)
        transaction.commit()
        return user

    @staticmethod
    def update():
        transaction.commit()

    @staticmethod
    def delete(user: User):
        db.session.delete(user)
        transaction.commit()
