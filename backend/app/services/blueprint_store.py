"""Blueprint hand-off store — the local key-value slot between wizard and results view.

The wizard writes the finished blueprint once; the results view reads it
back. A missing or corrupted entry never raises to the caller: it becomes a
"no blueprint found" result with a restart prompt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import MutableMapping, Optional

from pydantic import ValidationError

from ..constants import BLUEPRINT_STORAGE_KEY
from ..errors import ClientParseError
from ..schemas.blueprint_schema import BusinessBlueprint

logger = logging.getLogger(__name__)

NO_BLUEPRINT_MESSAGE = "No blueprint data found. Start the questions to generate one."
UNREADABLE_BLUEPRINT_MESSAGE = "We couldn't read your blueprint data."


@dataclass(frozen=True)
class BlueprintResult:
    """What the results view renders: a blueprint, or an error + restart action."""

    blueprint: Optional[BusinessBlueprint] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.blueprint is not None


class BlueprintStore:
    """Serializes one blueprint into a string key-value mapping."""

    def __init__(
        self,
        storage: Optional[MutableMapping[str, str]] = None,
        key: str = BLUEPRINT_STORAGE_KEY,
    ) -> None:
        self.storage: MutableMapping[str, str] = storage if storage is not None else {}
        self.key = key

    def save(self, blueprint: BusinessBlueprint) -> None:
        """Overwrite the stored entry with ``blueprint``."""
        self.storage[self.key] = blueprint.model_dump_json(by_alias=True)

    def read(self) -> BusinessBlueprint:
        """Parse the stored entry.

        Raises
        ------
        ClientParseError
            If the entry is absent or is not a valid blueprint.
        """
        raw = self.storage.get(self.key)
        if raw is None:
            raise ClientParseError(NO_BLUEPRINT_MESSAGE)
        try:
            return BusinessBlueprint.model_validate_json(raw)
        except ValidationError as exc:
            raise ClientParseError(UNREADABLE_BLUEPRINT_MESSAGE) from exc

    def load(self) -> Optional[BusinessBlueprint]:
        """Return the stored blueprint, or None when there is no usable entry."""
        return self.load_result().blueprint

    def load_result(self) -> BlueprintResult:
        try:
            return BlueprintResult(blueprint=self.read())
        except ClientParseError as exc:
            logger.warning("Failed to load blueprint from %r: %s", self.key, exc)
            return BlueprintResult(error=str(exc))

    def clear(self) -> None:
        self.storage.pop(self.key, None)
