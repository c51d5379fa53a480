import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ServiceBase:
    def __init__(self, session: Session):
        self._session = session

    def commit(self):
        try:
            self._session.commit()
        except Exception:
            logger.exception("Commit failed; rolling back.")
            self._session.rollback()
            raise

    def rollback(self):
        self._session.rollback()
