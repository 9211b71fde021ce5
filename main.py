#!/usr/bin/env python3

import argparse
import random
import sys

from axiomancer.core.data.data_structures import Decision
from axiomancer.core.data.game_enums import CombatType
from axiomancer.core.engine.dice import DiceRoller
from axiomancer.core.errors import CombatError, InvalidConfigurationError
from axiomancer.core.events import EventManager, LogSaveRequested
from axiomancer.core.rules_loader import RulesLoader
from axiomancer.game.ai import EnemyDecisionGenerator
from axiomancer.game.bestiary import BestiaryLoader
from axiomancer.game.combat import CombatManager, DamageCalculator, RoundResolver, is_ongoing
from axiomancer.game.managers import LogLevel, LogManager
from axiomancer.game.simulation import CombatSimulator
from axiomancer.renderers import TextRenderer

TYPE_KEYS = {"h": "heart", "b": "body", "m": "mind"}
ACTION_KEYS = {"a": "attack", "d": "defend"}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Heart, body and mind combat in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                          # Fight an enemy chosen from a list
  python main.py --enemy ent-enemy-01     # Fight the Disatree
  python main.py --simulate 1000 --seed 7 # Run 1000 automated combats
        """
    )
    parser.add_argument("--seed", type=int, help="Seed for dice and enemy decisions")
    parser.add_argument("--enemy", help="Enemy id from the bestiary")
    parser.add_argument("--policy", help="Override the enemy policy (random, aggressive, defensive)")
    parser.add_argument("--rules", help="Path to a combat rules YAML file")
    parser.add_argument("--bestiary", help="Path to a bestiary YAML file")
    parser.add_argument("--simulate", type=int, metavar="N", help="Run N automated combats instead of playing")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--save-log", action="store_true", help="Save the combat log to logs/ when combat ends")
    return parser.parse_args(argv)


def prompt_choice(label: str, keys: dict[str, str]) -> str:
    options = "/".join(f"[{key}]{value[1:]}" for key, value in keys.items())
    while True:
        raw = input(f"{label} {options}: ").strip().lower()
        if raw in keys:
            return keys[raw]
        if raw in keys.values():
            return raw
        print(f"Unknown choice: {raw!r}")


def choose_enemy(bestiary, enemy_id):
    if enemy_id:
        return bestiary.get_enemy(enemy_id)
    enemies = bestiary.all_enemies()
    for index, enemy in enumerate(enemies, start=1):
        print(f"  {index}. {enemy.name} (level {enemy.level}, {enemy.tier.value}) - {enemy.description}")
    while True:
        raw = input("Choose an enemy: ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(enemies):
            return enemies[int(raw) - 1]
        print(f"Pick a number between 1 and {len(enemies)}")


def report_warnings(log_manager: LogManager, renderer: TextRenderer, shown: int = 0) -> int:
    """Print warnings and errors logged since the last report; returns how many there are."""
    entries = log_manager.get_messages(min_level=LogLevel.WARNING)
    if len(entries) > shown:
        print(renderer.render_log([entry.format() for entry in entries[shown:]], count=len(entries) - shown))
    return len(entries)


def play(args: argparse.Namespace) -> int:
    event_manager = EventManager()
    log_manager = LogManager(event_manager)

    renderer = TextRenderer(use_color=not args.no_color)

    rules = RulesLoader(args.rules, event_manager).load()
    event_manager.process_events()
    shown = report_warnings(log_manager, renderer)
    renderer.friendship_max = rules.friendship_max

    bestiary = BestiaryLoader.load_from_file(args.bestiary)
    character = bestiary.get_character("Player")
    enemy_record = choose_enemy(bestiary, args.enemy)

    rng = random.Random(args.seed)
    calculator = DamageCalculator(rules)
    resolver = RoundResolver(DiceRoller(rng, rules.dice_sides), calculator)
    combat = CombatManager(event_manager, resolver, rules)
    decisions = EnemyDecisionGenerator(rng, event_manager)

    state = combat.start(character.to_combatant(rules), enemy_record.to_combatant(rules))
    enemy_policy = args.policy or state.enemy.policy_id
    event_manager.process_events()

    while is_ongoing(state):
        print()
        print(renderer.render_status(state))
        combat_type = CombatType.parse(prompt_choice("Type", TYPE_KEYS))
        low, high = calculator.attack_forecast(state.player.offense[combat_type], state.enemy.defense, combat_type)
        print(renderer.render_forecast(combat_type, low, high, state.enemy.name))
        action = prompt_choice("Action", ACTION_KEYS)

        player_decision = Decision.parse(combat_type, action)
        enemy_decision = decisions.decide(enemy_policy, state)
        state = combat.play_round(state, player_decision, enemy_decision)
        event_manager.process_events()

        print(renderer.render_round(state.log[-1], state.player.name, state.enemy.name))

    print()
    print(renderer.render_end(state))
    combat.conclude(state, character, enemy_record)

    if args.save_log:
        event_manager.publish(LogSaveRequested(round=state.round), source="main")
    event_manager.process_events()
    report_warnings(log_manager, renderer, shown)
    if log_manager.last_saved_path:
        print(f"Log saved to {log_manager.last_saved_path}")
    return 0


def simulate(args: argparse.Namespace) -> int:
    rules = RulesLoader(args.rules).load()
    bestiary = BestiaryLoader.load_from_file(args.bestiary)
    character = bestiary.get_character("Player")
    enemy_record = bestiary.get_enemy(args.enemy or "ent-enemy-01")

    simulator = CombatSimulator(enemy_policy=args.policy, seed=args.seed, rules=rules)
    report = simulator.run(character.to_combatant(rules), enemy_record.to_combatant(rules), args.simulate)

    summary = report.summary()
    print(f"{character.name} vs {enemy_record.name}: {summary['combats']} combats")
    for outcome, rate in summary["win_rates"].items():
        print(f"  {outcome:<20} {summary['outcomes'][outcome]:>6}  ({rate:.1%})")
    print(f"  mean rounds          {summary['rounds']['mean']}")
    print(f"  mean player health   {summary['mean_player_health']}")
    print(f"  mean enemy health    {summary['mean_enemy_health']}")
    print(f"  mean friendship      {summary['mean_friendship']}")
    if summary["unfinished"]:
        print(f"  unfinished           {summary['unfinished']}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        if args.simulate is not None:
            return simulate(args)
        return play(args)
    except KeyboardInterrupt:
        print("\n\nCombat abandoned")
        return 130
    except InvalidConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except CombatError as e:
        print(f"Combat error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
