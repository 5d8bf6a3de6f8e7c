"""
Field availability - Is an email or username still free?

Used by the registration form for live feedback and by the
RegistrationCoordinator as an early exit before hashing.
"""

import logging
from dataclasses import dataclass

from .exceptions import StoreUnavailable
from .models import Field
from .ports import AccountRepository

logger = logging.getLogger(__name__)


def normalize(field: Field, value: str) -> str:
    """
    Normalize a value the way it is stored.

    Emails: strip whitespace + lowercase. Usernames: strip whitespace.
    """
    value = value.strip()
    if field is Field.EMAIL:
        return value.lower()
    return value


@dataclass
class FieldAvailabilityChecker:
    """Answers availability queries against the account store."""

    repository: AccountRepository

    def check(self, field: Field | str, value: str) -> bool | None:
        """
        Check whether ``value`` is unused for ``field``.

        Args:
            field: Field member, or its string value ("email"/"username")
            value: Value to look up, normalized before the query

        Returns:
            True if unused, False if taken, None if the store could not
            be queried

        Raises:
            ValueError: If ``field`` is not a known Field
        """
        field = Field(field)
        value = normalize(field, value)

        try:
            taken = self.repository.is_taken(field, value)
        except StoreUnavailable as e:
            logger.warning("Availability of %s unknown: %s", field.value, e)
            return None

        return not taken
