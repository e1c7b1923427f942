"""
Game context - the host side of a battle.

Replaces process-wide game state with an explicit object that is
created by whoever owns the overworld/battle transitions and handed
to the battle system as its end-of-battle callback target.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from rpg_engine.core.events import EngineEvent, EventBus


class GameMode(Enum):
    """Top-level mode of the running game."""
    OVERWORLD = auto()
    BATTLE = auto()
    GAME_OVER = auto()


class BattleOutcome(Enum):
    """Terminal notification sent to the host once per battle."""
    VICTORY = auto()
    DEFEAT = auto()
    ESCAPED = auto()


class GameContext:
    """
    Mode and pause state for one running game.

    Usage:
        context = GameContext(event_bus)
        context.enter_battle()
        battle.on_battle_end(context.on_battle_end)
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.events = event_bus
        self.mode = GameMode.OVERWORLD
        self.paused = False
        self.last_outcome: Optional[BattleOutcome] = None
        self._awaiting_outcome = False
        self.logger = logging.getLogger(__name__)

    @property
    def in_battle(self) -> bool:
        """Check if a battle is running."""
        return self.mode == GameMode.BATTLE

    def enter_battle(self) -> None:
        """Switch to battle mode."""
        if self.mode == GameMode.GAME_OVER:
            raise RuntimeError("Cannot start a battle after game over.")
        self.last_outcome = None
        self._awaiting_outcome = True
        self._set_mode(GameMode.BATTLE)

    def on_battle_end(self, outcome: BattleOutcome) -> None:
        """
        Receive the terminal notification of the current battle.

        Defeat leads to game over; victory and escape return to the
        overworld. An outcome arriving outside a battle is logged and
        ignored.
        """
        if not self._awaiting_outcome:
            self.logger.warning(
                "Ignoring battle outcome %s: no battle is running", outcome.name
            )
            return

        self._awaiting_outcome = False
        self.last_outcome = outcome
        self.logger.info("Battle ended: %s", outcome.name)

        if outcome == BattleOutcome.DEFEAT:
            self._set_mode(GameMode.GAME_OVER)
        else:
            self._set_mode(GameMode.OVERWORLD)

    def pause(self) -> None:
        """Pause the game."""
        if self.paused:
            return
        self.paused = True
        if self.events:
            self.events.publish(EngineEvent.GAME_PAUSE)

    def resume(self) -> None:
        """Resume a paused game."""
        if not self.paused:
            return
        self.paused = False
        if self.events:
            self.events.publish(EngineEvent.GAME_RESUME)

    def _set_mode(self, mode: GameMode) -> None:
        previous = self.mode
        self.mode = mode
        if self.events and previous != mode:
            self.events.publish(
                EngineEvent.MODE_CHANGED,
                previous=previous,
                mode=mode,
            )
