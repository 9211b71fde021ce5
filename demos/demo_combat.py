#!/usr/bin/env python3

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from axiomancer.core.engine.dice import DiceRoller
from axiomancer.core.events import EventManager
from axiomancer.core.rules_loader import RulesLoader
from axiomancer.game.ai import EnemyDecisionGenerator
from axiomancer.game.bestiary import BestiaryLoader
from axiomancer.game.combat import CombatManager, DamageCalculator, RoundResolver, is_ongoing
from axiomancer.renderers import TextRenderer


def main(seed: int = 7):
    print("Axiomancer - Combat Demo")
    print("Both sides are driven by enemy policies; the player side plays aggressively")
    print("")

    event_manager = EventManager()
    rules = RulesLoader(event_manager=event_manager).load()
    bestiary = BestiaryLoader.load_from_file()

    dice = DiceRoller.seeded(seed, rules.dice_sides)
    decisions = EnemyDecisionGenerator(dice.rng, event_manager)
    combat = CombatManager(event_manager, RoundResolver(dice, DamageCalculator(rules)), rules)
    renderer = TextRenderer(friendship_max=rules.friendship_max)

    character = bestiary.get_character("Player")
    enemy_record = bestiary.get_enemy("ent-enemy-02")
    state = combat.start(character.to_combatant(rules), enemy_record.to_combatant(rules))

    while is_ongoing(state):
        print(renderer.render_status(state))
        player_decision = decisions.decide("aggressive", state)
        state = combat.play_round(state, player_decision, decisions.decide_for(state))
        print(renderer.render_round(state.log[-1], state.player.name, state.enemy.name))
        print("")
        event_manager.process_events()

    print(renderer.render_end(state))
    print("\nTo play interactively:")
    print("  - Run 'python main.py' and pick an enemy")
    print("  - Run 'python main.py --simulate 1000' for balancing statistics")


if __name__ == "__main__":
    main(int(sys.argv[1]) if len(sys.argv) > 1 else 7)
