from contextlib import contextmanager
import logging
from models import db
from hokies.services.errors import ServiceError

@contextmanager
def transactional(message="DB transaction failed"):
    """Context manager to wrap a database transaction."""
    try:
        yield
        db.session.commit()
    except ServiceError as e:
        logging.info(f"{message}: %s", e)
        db.session.rollback()
        raise
    except Exception as e:
        logging.error(f"{message}: %s", e, exc_info=True)
        db.session.rollback()
        raise
