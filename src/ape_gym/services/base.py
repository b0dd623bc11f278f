"""
Base service class.

Services sit between the API routes and the repositories: they own the
business rules and raise ApeGymError subclasses the API layer turns into
JSON error responses.
"""

import logging
from typing import Optional

from ..db.database import GymDatabase


class BaseService:
    """
    Base class for all services.

    Provides common functionality:
    - Access to the database the repositories are built on
    - Logging setup
    """

    def __init__(
        self,
        db: GymDatabase,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._db = db
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def db(self) -> GymDatabase:
        return self._db

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger
