"""
Configuration loader for combat rules.

This module handles loading and validating the YAML file that overrides
the default combat constants (dice size, defense multipliers, friendship
threshold and the critical-hit hook).
"""
import os
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

import yaml

from .data.game_enums import Advantage
from .data.game_info import DEFAULT_RULES, CombatRules
from .errors import InvalidConfigurationError
from .events.events import LogMessage

if TYPE_CHECKING:
    from .events.event_manager import EventManager

DEFAULT_RULES_PATH = "assets/config/combat_rules.yaml"


class RulesLoader:
    """Loads combat rules from a YAML file on top of the defaults."""

    def __init__(self, config_path: Optional[str] = None, event_manager: Optional["EventManager"] = None):
        self.explicit = bool(config_path)
        self.config_path = config_path or DEFAULT_RULES_PATH
        self.event_manager = event_manager
        self.warnings: list[str] = []
        self._config: dict[str, Any] = {}

    def _emit_log(self, message: str, level: str = "INFO") -> None:
        if level == "WARNING":
            self.warnings.append(message)
        if self.event_manager is None:
            return
        self.event_manager.publish(
            LogMessage(
                round=0,
                message=message,
                category="CONFIG",
                level=level,
                source="RulesLoader"
            ),
            source="RulesLoader"
        )

    def resolve_path(self) -> Path:
        """Resolve the rules path.

        The shipped default is relative to the project root; a path given by
        the caller is relative to the working directory.
        """
        if os.path.isabs(self.config_path):
            return Path(self.config_path)
        if self.explicit:
            return Path.cwd() / self.config_path
        project_root = Path(__file__).parent.parent.parent
        return project_root / self.config_path

    def load(self) -> CombatRules:
        """Load rules from the configured file.

        A missing default file falls back to the defaults with a warning. A
        missing explicit file, or one that cannot be parsed or validated,
        raises :class:`InvalidConfigurationError`.
        """
        config_file = self.resolve_path()
        if not config_file.exists():
            if self.explicit:
                raise InvalidConfigurationError(f"Rules file not found: {config_file}")
            self._emit_log(f"Rules file not found: {config_file}, using defaults", "WARNING")
            return DEFAULT_RULES

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidConfigurationError(f"Failed to parse rules file {config_file}: {e}") from e

        rules = self.parse(self._config)
        self._emit_log(f"Loaded combat rules from {config_file.name}")
        return rules

    @staticmethod
    def parse(data: dict[str, Any]) -> CombatRules:
        """Build a CombatRules from an already-loaded mapping."""
        if not isinstance(data, dict):
            raise InvalidConfigurationError("Rules file must contain a mapping at the top level")

        combat = RulesLoader._as_section(data.get("combat"), "combat")
        character = RulesLoader._as_section(data.get("character"), "character")

        overrides: dict[str, Any] = {}

        if "dice_sides" in combat:
            sides = RulesLoader._as_int(combat["dice_sides"], "combat.dice_sides")
            if sides < 1:
                raise InvalidConfigurationError("combat.dice_sides must be at least 1")
            overrides["dice_sides"] = sides

        if "friendship_max" in combat:
            maximum = RulesLoader._as_int(combat["friendship_max"], "combat.friendship_max")
            if maximum < 1:
                raise InvalidConfigurationError("combat.friendship_max must be at least 1")
            overrides["friendship_max"] = maximum

        for key in ("passive_defense_multiplier", "critical_multiplier"):
            if key in combat:
                overrides[key] = RulesLoader._as_positive_float(combat[key], f"combat.{key}")

        if "defense_multipliers" in combat:
            multipliers = dict(DEFAULT_RULES.defense_multipliers)
            section = RulesLoader._as_section(combat["defense_multipliers"], "combat.defense_multipliers")
            for name, value in section.items():
                try:
                    advantage = Advantage(str(name).lower())
                except ValueError:
                    raise InvalidConfigurationError(f"Unknown advantage in defense_multipliers: {name!r}") from None
                multipliers[advantage] = RulesLoader._as_positive_float(value, f"defense_multipliers.{name}")
            overrides["defense_multipliers"] = multipliers

        if "health_per_stat" in character:
            overrides["health_per_stat"] = RulesLoader._as_int(character["health_per_stat"], "character.health_per_stat")

        return CombatRules(**overrides)

    @staticmethod
    def _as_section(value: Any, name: str) -> dict[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise InvalidConfigurationError(f"{name} must be a mapping, got {value!r}")
        return value

    @staticmethod
    def _as_int(value: Any, name: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
        return value

    @staticmethod
    def _as_positive_float(value: Any, name: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
        if value <= 0:
            raise InvalidConfigurationError(f"{name} must be positive, got {value!r}")
        return float(value)


def load_rules(config_path: Optional[str] = None, event_manager: Optional["EventManager"] = None) -> CombatRules:
    """Convenience wrapper around :class:`RulesLoader`."""
    return RulesLoader(config_path, event_manager).load()
