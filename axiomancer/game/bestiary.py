"""
Character and enemy definitions loaded from YAML.

The bestiary is host-side data: it produces ``CharacterRecord`` and
``EnemyRecord`` values which are converted to combat snapshots at the
stat-derivation boundary.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..core.data.data_structures import CharacterRecord, EnemyRecord, TypeStats
from ..core.data.game_enums import EnemyTier
from ..core.errors import InvalidConfigurationError

DEFAULT_BESTIARY_PATH = "assets/data/bestiary.yaml"


@dataclass
class Bestiary:
    """Characters and enemies keyed for lookup."""
    characters: dict[str, CharacterRecord] = field(default_factory=dict)
    enemies: dict[str, EnemyRecord] = field(default_factory=dict)
    regions: dict[str, list[str]] = field(default_factory=dict)

    def get_enemy(self, enemy_id: str) -> EnemyRecord:
        try:
            return self.enemies[enemy_id]
        except KeyError:
            raise InvalidConfigurationError(f"Unknown enemy: {enemy_id!r}") from None

    def get_character(self, name: str) -> CharacterRecord:
        try:
            return self.characters[name]
        except KeyError:
            raise InvalidConfigurationError(f"Unknown character: {name!r}") from None

    def all_enemies(self) -> list[EnemyRecord]:
        """Every enemy in region order."""
        return [self.enemies[enemy_id] for ids in self.regions.values() for enemy_id in ids]


class BestiaryLoader:
    """Handles loading the bestiary from YAML files."""

    @staticmethod
    def resolve_path(file_path: Optional[str] = None) -> Path:
        """Resolve the bestiary path.

        The shipped default is relative to the project root; a path given by
        the caller is relative to the working directory.
        """
        if not file_path:
            return Path(__file__).parent.parent.parent / DEFAULT_BESTIARY_PATH
        path = Path(file_path)
        if os.path.isabs(path):
            return path
        return Path.cwd() / path

    @staticmethod
    def load_from_file(file_path: Optional[str] = None) -> Bestiary:
        path = BestiaryLoader.resolve_path(file_path)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise InvalidConfigurationError(f"Bestiary file not found: {path}") from None
        except yaml.YAMLError as e:
            raise InvalidConfigurationError(f"Failed to parse bestiary {path}: {e}") from e

        return BestiaryLoader.parse(data)

    @staticmethod
    def parse(data: dict[str, Any]) -> Bestiary:
        """Build a Bestiary from an already-loaded mapping."""
        data = _as_mapping(data, "bestiary")
        bestiary = Bestiary()

        for entry in _as_list(data.get("characters"), "characters"):
            record = BestiaryLoader._parse_character(entry)
            bestiary.characters[record.name] = record

        for region, entries in _as_mapping(data.get("regions"), "regions").items():
            ids = []
            for entry in _as_list(entries, f"regions.{region}"):
                record = BestiaryLoader._parse_enemy(entry)
                if record.enemy_id in bestiary.enemies:
                    raise InvalidConfigurationError(f"Duplicate enemy id: {record.enemy_id!r}")
                bestiary.enemies[record.enemy_id] = record
                ids.append(record.enemy_id)
            bestiary.regions[region] = ids

        return bestiary

    @staticmethod
    def _parse_character(entry: dict[str, Any]) -> CharacterRecord:
        entry = _as_mapping(entry, "character entry")
        try:
            name = entry["name"]
            stats = _as_mapping(entry["base_stats"], f"{name}.base_stats")
        except KeyError as e:
            raise InvalidConfigurationError(f"Character entry missing field {e}") from None

        try:
            return CharacterRecord(
                name=name,
                level=int(entry.get("level", 1)),
                base_stats=TypeStats.from_dict(stats),
                health=entry.get("health"),
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"{name}: invalid character value: {e}") from None

    @staticmethod
    def _parse_enemy(entry: dict[str, Any]) -> EnemyRecord:
        entry = _as_mapping(entry, "enemy entry")
        try:
            enemy_id = entry["id"]
            name = entry["name"]
            stats = _as_mapping(entry["stats"], f"{entry.get('id')}.stats")
        except KeyError as e:
            raise InvalidConfigurationError(f"Enemy entry missing field {e}") from None

        try:
            tier = EnemyTier(str(entry.get("tier", "normal")).lower())
        except ValueError:
            raise InvalidConfigurationError(f"{name}: unknown enemy tier {entry.get('tier')!r}") from None

        try:
            return EnemyRecord.from_stat_block(
                enemy_id,
                name,
                int(entry.get("level", 1)),
                stats,
                tier=tier,
                policy_id=entry.get("policy"),
                description=entry.get("description", ""),
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"{name}: invalid enemy value: {e}") from None


def _as_mapping(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidConfigurationError(f"{name} must be a mapping, got {value!r}")
    return value


def _as_list(value: Any, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidConfigurationError(f"{name} must be a list, got {value!r}")
    return value
