"""
Battle Demo: party vs. field enemies.

Demonstrates:
- Loading units and an encounter from the data directory
- Selection and round resolution
- Presentation through BattleUIController
- Host notification through GameContext

The input surface here is automatic: every party member fights the
first living enemy, or tries to run with --run.

Usage:
    python demos/battle_demo.py --seed 7
    python demos/battle_demo.py --run
"""

import argparse
import logging
import random
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rpg_engine.core import EventBus, GameContext
from rpg_engine.resources import Database
from rpg_framework.battle import (
    BattleSystem,
    BattleUIController,
    CommandKind,
    load_encounter,
)

DATA_PATH = Path(__file__).parent.parent / "data"


def choose_command(battle: BattleSystem, run: bool) -> tuple[CommandKind, int]:
    """Pick a command for the current party member."""
    if run:
        return CommandKind.RUN, 0
    for index, enemy in enumerate(battle.enemies):
        if enemy.is_alive:
            return CommandKind.FIGHT, index
    return CommandKind.FIGHT, 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run one headless battle.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    parser.add_argument("--encounter", default="first_battle", help="Encounter id")
    parser.add_argument("--run", action="store_true", help="Always choose Run")
    parser.add_argument("--max-rounds", type=int, default=50)
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("BattleDemo")

    db = Database(DATA_PATH)
    db.load_all()
    party, enemies = load_encounter(db, args.encounter)

    events = EventBus()
    context = GameContext(events)
    battle = BattleSystem(events, rng=random.Random(args.seed))
    battle.on_battle_end(context.on_battle_end)

    battle_ui = BattleUIController(events, battle)
    battle_ui.on_message(print)

    context.enter_battle()
    battle.start_battle(party, enemies)

    while battle_ui.interactable and battle.round_number <= args.max_rounds:
        kind, target = choose_command(battle, args.run)
        battle.submit_choice(kind, target)

    print()
    for line in battle_ui.render_lines():
        print(line)

    if context.last_outcome is None:
        logger.warning("Stopped after %d rounds without a result.", args.max_rounds)
        return 1

    logger.info("Outcome: %s, mode: %s", context.last_outcome.name, context.mode.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
