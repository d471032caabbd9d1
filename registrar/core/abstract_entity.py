from datetime import datetime, timezone
from typing import Any, Dict


class AbstractEntity:
    """
    Base class for the mutable domain objects:
    - stable identifier
    - created/updated timestamps
    - versioning, bumped on every state change
    """

    def __init__(self, entity_id: str):
        self._id = entity_id
        self._created_at = datetime.now(timezone.utc)
        self._updated_at = self._created_at
        self._version = 1

    @property
    def id(self) -> str:
        return self._id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def version(self) -> int:
        return self._version

    def touch(self) -> None:
        """Record a state change."""
        self._updated_at = datetime.now(timezone.utc)
        self._version += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
            'updated_at': self._updated_at.isoformat(),
            'version': self._version,
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, version={self._version})"
