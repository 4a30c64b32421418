from flask import request

from library_app.errors import ValidationError


def request_payload() -> dict:
    """JSON object body, or the form fields when the body is not JSON."""
    body = request.get_json(silent=True)
    if body is None:
        return request.form.to_dict()
    if not isinstance(body, dict):
        raise ValidationError("request body must be an object")
    return body
