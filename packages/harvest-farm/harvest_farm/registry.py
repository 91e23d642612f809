"""GameData - definition registry keyed by id."""
from __future__ import annotations

import logging
from typing import Any, Iterator, TypeVar

from harvest.types import DefinitionError
from harvest_combat.tables import DEFAULT_BOSSES
from harvest_combat.types import Boss, EncounterDef, Quirk

from harvest_farm.defs import (
    CleanupDef,
    CropDef,
    Definition,
    HelperDef,
    RecipeDef,
    VendorItem,
)

logger = logging.getLogger(__name__)

AnyDef = Definition | EncounterDef
D = TypeVar("D")

_SECTIONS: dict[str, type] = {
    "crops": CropDef,
    "cleanups": CleanupDef,
    "vendor": VendorItem,
    "recipes": RecipeDef,
    "encounters": EncounterDef,
    "helpers": HelperDef,
}


class GameData:
    """Stores item/rule definitions; insertion order is generation order."""

    def __init__(self) -> None:
        self._definitions: dict[str, AnyDef] = {}

    def define(self, definition: AnyDef) -> None:
        """Register a definition. Overwrites if id exists."""
        self._definitions[definition.id] = definition

    def get(self, item_id: str) -> AnyDef:
        """Look up definition. Raises KeyError if not defined."""
        if item_id not in self._definitions:
            raise KeyError(item_id)
        return self._definitions[item_id]

    def find(self, item_id: str, kind: type[D]) -> D | None:
        """Definition of ``kind`` with ``item_id``, or None."""
        defn = self._definitions.get(item_id)
        return defn if isinstance(defn, kind) else None

    def has(self, item_id: str) -> bool:
        return item_id in self._definitions

    def of_type(self, kind: type[D]) -> list[D]:
        return [d for d in self._definitions.values() if isinstance(d, kind)]

    @property
    def crops(self) -> list[CropDef]:
        return self.of_type(CropDef)

    @property
    def cleanups(self) -> list[CleanupDef]:
        return self.of_type(CleanupDef)

    @property
    def vendor(self) -> list[VendorItem]:
        return self.of_type(VendorItem)

    @property
    def recipes(self) -> list[RecipeDef]:
        return self.of_type(RecipeDef)

    @property
    def encounters(self) -> list[EncounterDef]:
        return self.of_type(EncounterDef)

    @property
    def helpers(self) -> list[HelperDef]:
        return self.of_type(HelperDef)

    def ids(self) -> list[str]:
        return list(self._definitions)

    def __iter__(self) -> Iterator[AnyDef]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    # --- Loading ---

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> GameData:
        """Build a registry from plain data, skipping malformed records.

        ``raw`` maps section names (crops, cleanups, vendor, recipes,
        encounters, helpers) to either a list of records or an id-keyed
        mapping of records. A bad record is logged and skipped.
        """
        data = cls()
        for section, records in raw.items():
            kind = _SECTIONS.get(section)
            if kind is None:
                logger.warning("Unknown definition section %r skipped", section)
                continue
            if isinstance(records, dict):
                records = [{"id": k, **v} for k, v in records.items()]
            for record in records:
                try:
                    data.define(_build(kind, record))
                except (DefinitionError, TypeError, ValueError, KeyError) as exc:
                    logger.warning(
                        "Skipping malformed %s record %r: %s",
                        section, record.get("id") if isinstance(record, dict) else record, exc,
                    )
        return data


def _build(kind: type, record: dict[str, Any]) -> AnyDef:
    if not isinstance(record, dict):
        raise TypeError(f"record must be a mapping, got {type(record).__name__}")
    fields = dict(record)
    if "prerequisites" in fields:
        fields["prerequisites"] = tuple(fields["prerequisites"])
    if kind is EncounterDef:
        if "wave_size" in fields:
            fields["wave_size"] = tuple(fields["wave_size"])
        if "armor_drops" in fields:
            fields["armor_drops"] = tuple(fields["armor_drops"])
        if fields.get("boss") is not None:
            fields["boss"] = _build_boss(fields["boss"])
    return kind(**fields)


def _build_boss(raw: str | dict[str, Any]) -> Boss:
    if isinstance(raw, str):
        if raw not in DEFAULT_BOSSES:
            raise DefinitionError(f"unknown boss {raw!r}")
        return DEFAULT_BOSSES[raw]
    fields = dict(raw)
    quirk = fields.get("quirk")
    if isinstance(quirk, dict):
        fields["quirk"] = Quirk(**quirk)
    return Boss(**fields)
