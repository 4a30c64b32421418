from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import DataAccessFailure
from library_app.extensions import db


def commit():
    """Commit the current unit of work; rollback and raise DataAccessFailure on error."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise DataAccessFailure() from e


def rollback():
    db.session.rollback()
