# library_app/services/image_store.py
from __future__ import annotations

import os
import secrets

from flask import current_app, url_for
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from library_app.errors import ValidationError


class ImageStore:
    """Book cover images on local disk, addressed by file name."""

    @staticmethod
    def folder() -> str:
        path = current_app.config["UPLOAD_FOLDER"]
        os.makedirs(path, exist_ok=True)
        return path

    @staticmethod
    def _allowed(filename: str) -> bool:
        if "." not in filename:
            return False
        ext = filename.rsplit(".", 1)[1].lower()
        return ext in current_app.config["ALLOWED_IMAGE_EXTENSIONS"]

    @staticmethod
    def save(file: FileStorage | None) -> str:
        """Store an uploaded image and return its reference."""
        if file is None or not file.filename:
            raise ValidationError("Image is Required", errors=[{"field": "image", "msg": "Image is Required"}])

        filename = secure_filename(file.filename)
        if not filename or not ImageStore._allowed(filename):
            raise ValidationError(
                "unsupported image type",
                errors=[{"field": "image", "msg": "unsupported image type"}],
            )

        # aynı isimli yüklemeler birbirini ezmesin
        ref = f"{secrets.token_hex(8)}_{filename}"
        file.save(os.path.join(ImageStore.folder(), ref))
        current_app.logger.info(f"[images] stored {ref}")
        return ref

    @staticmethod
    def delete(ref: str | None) -> bool:
        """Remove a stored image. Failures are logged, never raised."""
        if not ref:
            return False
        path = os.path.join(current_app.config["UPLOAD_FOLDER"], secure_filename(ref))
        try:
            if os.path.exists(path):
                os.remove(path)
                current_app.logger.info(f"[images] deleted {ref}")
                return True
            return False
        except OSError as e:
            current_app.logger.warning(f"[images] could not delete {ref}: {e}")
            return False

    @staticmethod
    def url_for(ref: str | None) -> str | None:
        if not ref:
            return None
        base = current_app.config.get("PUBLIC_BASE_URL")
        if base:
            return f"{base.rstrip('/')}/{ref}"
        return url_for("uploads.serve_image", filename=ref, _external=True)
