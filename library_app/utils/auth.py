from flask import request


def extract_token() -> str | None:
    """Token from ``Authorization: Bearer <token>`` or the legacy ``token`` header."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return (request.headers.get("token") or "").strip() or None
