"""
Game Database.

Handles loading and validation of static unit data (party members,
enemies, encounters).
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class Database:
    """
    Central storage for static battle data.

    Layout under the data path:
        schemas/unit.schema.json
        schemas/encounter.schema.json
        database/party/*.json
        database/enemies/*.json
        database/encounters/*.json
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        # Data stores
        self.party: dict[str, dict[str, Any]] = {}
        self.enemies: dict[str, dict[str, Any]] = {}
        self.encounters: dict[str, dict[str, Any]] = {}

        self.logger = logging.getLogger(__name__)

    def load_all(self) -> None:
        """Load all data from disk."""
        self._load_schemas()

        self.party = self._load_category("party", "unit.schema.json")
        self.enemies = self._load_category("enemies", "unit.schema.json")
        self.encounters = self._load_category("encounters", "encounter.schema.json")

        self.logger.info(
            "Loaded %d party members, %d enemies, %d encounters.",
            len(self.party),
            len(self.enemies),
            len(self.encounters),
        )

    def _load_schemas(self) -> None:
        """Load JSON schemas."""
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning("Schema directory not found: %s", schema_dir)
            return

        for schema_file in schema_dir.glob("*.schema.json"):
            try:
                with open(schema_file, 'r') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error("Failed to load schema %s: %s", schema_file, e)

    def _load_category(self, folder: str, schema_name: str) -> dict[str, dict[str, Any]]:
        """Load all JSON files in a category folder."""
        category_dir = self._data_path / "database" / folder
        data_store: dict[str, dict[str, Any]] = {}

        if not category_dir.exists():
            self.logger.warning("Data directory not found: %s", category_dir)
            return data_store

        schema = self._schemas.get(schema_name)
        if not schema:
            self.logger.warning("No schema found for %s (%s)", folder, schema_name)

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error("Failed to load %s: %s", file_path, e)
                continue

            # A file holds either one definition or a list of them
            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                if schema:
                    try:
                        jsonschema.validate(instance=entry, schema=schema)
                    except jsonschema.ValidationError as e:
                        self.logger.error("Validation error in %s: %s", file_path, e.message)
                        continue
                if isinstance(entry, dict) and 'id' in entry:
                    data_store[entry['id']] = entry

        return data_store

    def get_party_member(self, unit_id: str) -> dict[str, Any] | None:
        return self.party.get(unit_id)

    def get_enemy(self, unit_id: str) -> dict[str, Any] | None:
        return self.enemies.get(unit_id)

    def get_encounter(self, encounter_id: str) -> dict[str, Any] | None:
        return self.encounters.get(encounter_id)

    def get_roster(self, category: str, unit_ids: list[str]) -> list[dict[str, Any]]:
        """
        Resolve a list of unit ids into definitions, keeping order.

        The same id may appear more than once (two of the same enemy).

        Raises:
            KeyError: If the category or any id is unknown
        """
        stores = {"party": self.party, "enemies": self.enemies}
        if category not in stores:
            raise KeyError(f"Unknown roster category: {category}")

        store = stores[category]
        roster = []
        for unit_id in unit_ids:
            if unit_id not in store:
                raise KeyError(f"Unknown {category} unit: {unit_id}")
            roster.append(store[unit_id])
        return roster
