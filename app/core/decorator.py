import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import Conflict, InternalError

logger = logging.getLogger(__name__)


def db_exception(func):
    """Translate store failures raised inside a service method into domain errors.

    The first positional argument must be the service instance (with a ``db``
    session attribute) so the failed transaction can be rolled back.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except IntegrityError:
            self.db.rollback()
            # almost always a duplicate unique key
            raise Conflict("Duplicate entry: already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error in {func.__name__}: {e}", exc_info=True)
            raise InternalError("Database error occurred")

    return wrapper
