import logging

from flask import Flask, jsonify
from library_app.config import Config
from library_app.extensions import db, migrate
from library_app.errors import register_error_handlers


def create_app(config_object=Config, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # 1) Önce db init (db.engine / db.session için şart)
    db.init_app(app)
    migrate.init_app(app, db)

    # 2) Modeller metadata'ya kayıt olsun
    from library_app.models import user, book, borrow  # noqa: F401

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()
            app.logger.debug(f"[app] tables ensured on {db.engine.url.render_as_string(hide_password=True)}")

    # 3) Hata yakalayıcılar
    register_error_handlers(app)

    # 4) API blueprintleri
    from library_app.controllers.auth_controller import auth_bp
    from library_app.controllers.user_controller import user_bp
    from library_app.controllers.book_controller import book_bp
    from library_app.controllers.borrow_controller import borrow_bp
    from library_app.controllers.upload_controller import uploads_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(user_bp, url_prefix="/users")
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(borrow_bp, url_prefix="/borrow")
    app.register_blueprint(uploads_bp, url_prefix="/uploads")

    # 5) CLI komutları
    from library_app.cli import register_commands
    register_commands(app)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    return app
