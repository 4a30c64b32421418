import re
from datetime import date, datetime

from library_app.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
PHONE_RE = re.compile(r"^\+?[0-9][0-9 \-]{5,18}[0-9]$")
ISBN_RE = re.compile(r"[0-9]+")
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# alan -> (minimum uzunluk, mesaj)
BOOK_RULES = {
    "title": (4, "book title should be at least 4 characters"),
    "author": (3, "author name should be at least 3 characters"),
    "subject": (4, "subject name should be at least 4 characters"),
    "rack_number": (2, "rack number should be at least 2 characters"),
}
ISBN_MIN_LENGTH = 10
BOOK_FIELDS = ("title", "author", "subject", "isbn", "rack_number")


def _clean(value):
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return value.strip()


class FieldErrors:
    """Collects per-field messages and raises them together."""

    def __init__(self):
        self.errors = []

    def add(self, field: str, msg: str):
        self.errors.append({"field": field, "msg": msg})

    def raise_if_any(self, message: str = "invalid input"):
        if self.errors:
            raise ValidationError(message, errors=self.errors)


def is_valid_email(value) -> bool:
    return isinstance(value, str) and bool(EMAIL_RE.match(value))


def is_valid_phone(value) -> bool:
    if not isinstance(value, str) or not PHONE_RE.match(value):
        return False
    digits = re.sub(r"\D", "", value)
    return 7 <= len(digits) <= 15


def _check_password(errors: FieldErrors, password):
    if not isinstance(password, str) or not 8 <= len(password) <= 12:
        errors.add("password", "password should be between (8-12) character")


def validate_registration(name, email, password, phone) -> dict:
    errors = FieldErrors()
    name = _clean(name)
    email = _clean(email)
    phone = _clean(phone)

    if not isinstance(name, str) or not name:
        errors.add("name", "please enter a valid name")
    elif not 3 <= len(name) <= 20:
        errors.add("name", "name should be between (3-20) character")
    if not is_valid_email(email):
        errors.add("email", "please enter a valid email!")
    _check_password(errors, password)
    if not is_valid_phone(phone):
        errors.add("phone", "please enter a valid phone number!")

    errors.raise_if_any()
    return {"name": name, "email": email.lower(), "password": password, "phone": phone}


def validate_login(email, password) -> dict:
    errors = FieldErrors()
    email = _clean(email)
    if not is_valid_email(email):
        errors.add("email", "please enter a valid email!")
    _check_password(errors, password)
    errors.raise_if_any()
    return {"email": email.lower(), "password": password}


def _check_book_field(errors: FieldErrors, field: str, value):
    if field == "isbn":
        if not isinstance(value, str) or not ISBN_RE.fullmatch(value):
            errors.add("isbn", "please enter a valid ISBN")
        elif len(value) < ISBN_MIN_LENGTH:
            errors.add("isbn", "ISBN should be at least 10 characters")
        return

    min_len, msg = BOOK_RULES[field]
    if not isinstance(value, str) or not value:
        errors.add(field, f"please enter a valid {field.replace('_', ' ')}")
    elif len(value) < min_len:
        errors.add(field, msg)


def validate_book_fields(data: dict, partial: bool = False) -> dict:
    """Validate catalog fields.

    With ``partial=True`` only the fields present (and non-empty) in ``data`` are
    checked and returned; omitted fields keep their stored value.
    """
    errors = FieldErrors()
    cleaned = {}
    for field in BOOK_FIELDS:
        value = _clean(data.get(field))
        if partial and (value is None or value == ""):
            continue
        if isinstance(value, int) and not isinstance(value, bool) and field == "isbn":
            value = str(value)
        _check_book_field(errors, field, value)
        cleaned[field] = value
    errors.raise_if_any()
    return cleaned


def parse_return_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    error = ValidationError(
        "returnDate must be a valid date (YYYY-MM-DD)",
        errors=[{"field": "returnDate", "msg": "please enter a valid date"}],
    )
    text = str(value).strip() if value is not None else ""
    # sadece YYYY-MM-DD
    if not DATE_RE.fullmatch(text):
        raise error
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise error
