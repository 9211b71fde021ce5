"""
Unit tests for loading characters and enemies from YAML.
"""

import pytest

from axiomancer.core.data.data_structures import TypeStats
from axiomancer.core.data.game_enums import EnemyTier
from axiomancer.core.data.game_info import DEFAULT_RULES
from axiomancer.core.errors import InvalidConfigurationError
from axiomancer.game.bestiary import BestiaryLoader


class TestShippedBestiary:
    """The bundled bestiary loads and converts cleanly."""

    @pytest.fixture
    def bestiary(self):
        return BestiaryLoader.load_from_file()

    def test_disatree(self, bestiary):
        disatree = bestiary.get_enemy("ent-enemy-01")

        assert disatree.name == "Disatree"
        assert disatree.description == "A tree who disagrees with you"
        assert disatree.skill == TypeStats.uniform(1)
        assert disatree.to_combatant().health == 10

    def test_player(self, bestiary):
        player = bestiary.get_character("Player")

        assert player.base_stats == TypeStats(heart=4, body=3, mind=1)
        assert player.to_combatant(DEFAULT_RULES).max_health == 26

    def test_regions_keep_order(self, bestiary):
        names = [enemy.name for enemy in bestiary.all_enemies()]

        assert names[0] == "Disatree"
        assert len(names) == len(bestiary.enemies)

    def test_tiers_and_policies(self, bestiary):
        for enemy in bestiary.all_enemies():
            combatant = enemy.to_combatant()
            assert combatant.policy_id in {"random", "aggressive", "defensive"}
            assert isinstance(enemy.tier, EnemyTier)

    def test_unknown_lookup(self, bestiary):
        with pytest.raises(InvalidConfigurationError):
            bestiary.get_enemy("dragon")
        with pytest.raises(InvalidConfigurationError):
            bestiary.get_character("Nobody")


class TestBestiaryParsing:
    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigurationError):
            BestiaryLoader.load_from_file(str(tmp_path / "nope.yaml"))

    def test_unknown_tier(self):
        data = {"regions": {"r": [{"id": "x", "name": "X", "tier": "legendary", "stats": {}}]}}

        with pytest.raises(InvalidConfigurationError):
            BestiaryLoader.parse(data)

    def test_duplicate_ids(self):
        stats = {
            "maxHealth": 5,
            "physicalSkill": 1, "physicalDefense": 1,
            "mentalSkill": 1, "mentalDefense": 1,
            "emotionalSkill": 1, "emotionalDefense": 1,
        }
        entry = {"id": "x", "name": "X", "stats": stats}

        with pytest.raises(InvalidConfigurationError):
            BestiaryLoader.parse({"regions": {"a": [entry], "b": [entry]}})

    def test_missing_stats(self):
        with pytest.raises(InvalidConfigurationError):
            BestiaryLoader.parse({"regions": {"r": [{"id": "x", "name": "X"}]}})

    @pytest.mark.parametrize("data", [
        ["not", "a", "mapping"],
        {"regions": [{"id": "x", "name": "X"}]},
        {"regions": {"r": {"id": "x", "name": "X"}}},
        {"regions": {"r": ["ent-enemy-01"]}},
        {"regions": {"r": [{"id": "x", "name": "X", "stats": [1, 2, 3]}]}},
        {"characters": {"name": "Player"}},
        {"characters": ["Player"]},
        {"characters": [{"name": "Player", "base_stats": 4}]},
        {"characters": [{"name": "Player", "level": "one", "base_stats": {"heart": 1}}]},
    ])
    def test_wrong_shapes_rejected(self, data):
        with pytest.raises(InvalidConfigurationError):
            BestiaryLoader.parse(data)


class TestBestiaryPaths:
    """Explicit bestiary paths are relative to the working directory."""

    def test_relative_path_uses_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "monsters.yaml").write_text(
            "characters:\n"
            "  - name: Player\n"
            "    level: 2\n"
            "    base_stats: {heart: 1, body: 1, mind: 1}\n",
            encoding="utf-8",
        )
        monkeypatch.chdir(tmp_path)

        bestiary = BestiaryLoader.load_from_file("monsters.yaml")

        assert bestiary.get_character("Player").level == 2

    def test_missing_relative_path_raises(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(InvalidConfigurationError, match="not found"):
            BestiaryLoader.load_from_file("assets/data/bestiary.yaml")

    def test_default_path_ignores_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert "ent-enemy-01" in BestiaryLoader.load_from_file().enemies
