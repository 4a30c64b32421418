import secrets

from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

from library_app.errors import (
    AccountInactive,
    Conflict,
    DuplicateEmail,
    Forbidden,
    InvalidCredential,
    NotFound,
    Unauthorized,
)
from library_app.models.user import User, ONLINE, OFFLINE, STATUS_ACTIVE, STATUS_PENDING, ROLE_ADMIN, ROLE_USER
from library_app.repositories.user_repo import UserRepo
from library_app.utils.validators import validate_login, validate_registration


def require_admin(actor: User):
    if actor is None or not actor.is_admin:
        raise Forbidden("admin privileges required")


def require_self_or_admin(actor: User, user_id: int):
    if actor is None:
        raise Forbidden()
    if not actor.is_admin and actor.id != user_id:
        raise Forbidden("you can only act on your own account")


def user_public_dict(user: User) -> dict:
    # password_hash ve token asla listelere çıkmaz
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "status": user.status,
        "online_status": user.online_status,
        "type": user.type,
    }


class AuthService:
    @staticmethod
    def _new_token() -> str:
        token = secrets.token_hex(16)
        while UserRepo.get_by_token(token):
            token = secrets.token_hex(16)
        return token

    @staticmethod
    def _create(name, email, password, phone, role: str, status: int) -> User:
        fields = validate_registration(name, email, password, phone)

        if UserRepo.get_by_email(fields["email"]):
            raise DuplicateEmail("email already exists !")

        user = User(
            name=fields["name"],
            email=fields["email"],
            password_hash=generate_password_hash(fields["password"]),
            phone=fields["phone"],
            token=AuthService._new_token(),
            status=status,
            online_status=OFFLINE,
            type=role,
        )
        return UserRepo.create(user)

    @staticmethod
    def register(name: str, email: str, password: str, phone: str) -> User:
        user = AuthService._create(name, email, password, phone, role=ROLE_USER, status=STATUS_PENDING)
        current_app.logger.info(f"[auth] registered user_id={user.id} (pending approval)")
        return user

    @staticmethod
    def create_admin(name: str, email: str, password: str, phone: str) -> User:
        user = AuthService._create(name, email, password, phone, role=ROLE_ADMIN, status=STATUS_ACTIVE)
        current_app.logger.info(f"[auth] created admin user_id={user.id}")
        return user

    @staticmethod
    def login(email: str, password: str) -> dict:
        fields = validate_login(email, password)

        user = UserRepo.get_by_email(fields["email"])
        if not user:
            raise NotFound("the email is not found !")

        if not check_password_hash(user.password_hash, fields["password"]):
            raise InvalidCredential("password is incorrect !")

        if user.status == STATUS_PENDING:
            raise AccountInactive("your account is inactive")

        user.online_status = ONLINE
        UserRepo.update()
        current_app.logger.info(f"[auth] login user_id={user.id}")

        # token her login'de aynı kalır (kayıtta üretildi)
        return {"id": user.id, "token": user.token, "role": user.type}

    @staticmethod
    def logout(actor: User, user_id: int):
        require_self_or_admin(actor, user_id)

        user = UserRepo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")

        if user.online_status != OFFLINE:
            user.online_status = OFFLINE
            UserRepo.update()
        current_app.logger.info(f"[auth] logout user_id={user.id}")

    @staticmethod
    def authenticate_token(token: str | None) -> User:
        if not token:
            raise Unauthorized("missing token")
        user = UserRepo.get_by_token(token)
        if not user:
            raise Unauthorized("invalid token")
        if not user.is_active:
            raise AccountInactive("your account is inactive")
        return user

    # -----------------------------
    # Admin: hesap onayı
    # -----------------------------
    @staticmethod
    def list_pending_users(actor: User) -> list[User]:
        require_admin(actor)
        return UserRepo.list_pending()

    @staticmethod
    def approve_user(actor: User, user_id: int) -> User:
        require_admin(actor)

        user = UserRepo.get_by_id(user_id)
        if not user:
            raise NotFound("user not found !")

        if user.status != STATUS_ACTIVE:
            user.status = STATUS_ACTIVE
            UserRepo.update()
        current_app.logger.info(f"[auth] approved user_id={user.id} by admin_id={actor.id}")
        return user

    @staticmethod
    def reject_user(actor: User, user_id: int):
        require_admin(actor)

        user = UserRepo.get_by_id(user_id)
        if not user:
            raise NotFound("user not found !")

        if user.status != STATUS_PENDING:
            raise Conflict("only pending accounts can be rejected")

        UserRepo.delete(user)
        current_app.logger.info(f"[auth] rejected user_id={user_id} by admin_id={actor.id}")
