"""
Battle system - turn-based party combat controller.
"""

from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import Any, Callable, Iterable, Optional

from rpg_engine.core.context import BattleOutcome
from rpg_engine.core.events import BattleEvent, EventBus
from rpg_framework.battle.actions import (
    BattleActionExecutor,
    CommandKind,
    RandomSource,
)
from rpg_framework.battle.actor import (
    ActorSide,
    BattleUnit,
    UnitData,
    create_roster,
)
from rpg_framework.battle.config import BattleConfig, DEFAULT_CONFIG
from rpg_framework.battle.resolver import RoundResolver, RoundResult
from rpg_framework.battle.selection import SelectionController, SubmitStatus


class BattleState(Enum):
    """State of the battle."""
    NONE = auto()
    SELECTION = auto()
    RESOLUTION = auto()
    VICTORY = auto()
    DEFEAT = auto()
    FLED = auto()


_OUTCOME_STATES = {
    BattleOutcome.VICTORY: BattleState.VICTORY,
    BattleOutcome.DEFEAT: BattleState.DEFEAT,
    BattleOutcome.ESCAPED: BattleState.FLED,
}

_OUTCOME_MESSAGES = {
    BattleOutcome.VICTORY: "Victory!",
    BattleOutcome.DEFEAT: "Party wiped...",
    BattleOutcome.ESCAPED: "Escaped from battle.",
}

UnitSpec = UnitData | dict[str, Any]


class BattleSystem:
    """
    Turn-based battle controller.

    Owns both rosters for the lifetime of one battle and cycles
    selection -> resolution until victory, defeat or escape.

    Manages:
    - Battle initialization
    - Command selection (one per living party member)
    - Round resolution
    - Win/lose/escape notification

    Usage:
        battle = BattleSystem(event_bus, rng=random.Random(7))
        battle.on_battle_end(context.on_battle_end)
        context.enter_battle()
        battle.start_battle(party_data, enemy_data)
        battle.submit_choice(CommandKind.FIGHT, target_index=0)
    """

    def __init__(
        self,
        events: EventBus,
        rng: Optional[RandomSource] = None,
        config: BattleConfig = DEFAULT_CONFIG,
    ):
        self.events = events
        self.config = config
        self._executor = BattleActionExecutor(rng or random.Random(), config)

        # State
        self.state = BattleState.NONE
        self._party: list[BattleUnit] = []
        self._enemies: list[BattleUnit] = []
        self._selection: Optional[SelectionController] = None
        self._resolver: Optional[RoundResolver] = None
        self._round_number = 0
        self._history: list[RoundResult] = []
        self._outcome: Optional[BattleOutcome] = None

        # Callbacks
        self._on_battle_end: Optional[Callable[[BattleOutcome], None]] = None

        self.logger = logging.getLogger(__name__)

    def start_battle(
        self,
        party: Iterable[UnitSpec],
        enemies: Iterable[UnitSpec],
    ) -> bool:
        """
        Start a battle.

        Args:
            party: Party unit definitions, in roster order
            enemies: Enemy unit definitions, in roster order

        Returns:
            True if battle started, False if one is already running
        """
        if self.state != BattleState.NONE:
            return False

        self._party = create_roster(party, ActorSide.PLAYER)
        self._enemies = create_roster(enemies, ActorSide.ENEMY)
        self._selection = SelectionController(self._party, self._enemies)
        self._resolver = RoundResolver(self._party, self._enemies, self._executor)
        self._round_number = 0
        self._history = []
        self._outcome = None

        self.logger.info(
            "Battle started: %d party members vs %d enemies",
            len(self._party),
            len(self._enemies),
        )
        self.events.publish(
            BattleEvent.BATTLE_STARTED,
            text="A battle begins!",
            party=tuple(u.snapshot() for u in self._party),
            enemies=tuple(u.snapshot() for u in self._enemies),
        )

        # An empty roster is already wiped out
        outcome = self._check_battle_end()
        if outcome:
            self._end_battle(outcome)
        else:
            self._open_selection()
        return True

    def submit_choice(
        self,
        command_kind: CommandKind,
        target_index: Optional[int] = 0,
    ) -> SubmitStatus:
        """
        Queue a command for the party member whose turn it is.

        When the last living member has chosen, the round resolves
        before this call returns.
        """
        if self.state != BattleState.SELECTION or self._selection is None:
            return SubmitStatus.REJECTED

        status = self._selection.submit_choice(command_kind, target_index)
        if status == SubmitStatus.REJECTED:
            return status

        actor = self._party[self._selection.queued_actions[-1].actor_index]

        self.events.publish(
            BattleEvent.CHOICE_QUEUED,
            text=f"{actor.name} chooses {command_kind.label}.",
            actor=actor.name,
            command=command_kind,
        )

        if status == SubmitStatus.ROUND_READY:
            self._resolve_round()
        return status

    def _open_selection(self) -> None:
        """Start the selection phase of the next round."""
        self._round_number += 1
        self.state = BattleState.SELECTION
        self._selection.begin_round()

        if self._selection.is_closed:
            # Nobody can choose; resolve with no party actions
            self._resolve_round()
            return

        self.events.publish(
            BattleEvent.SELECTION_OPENED,
            round_number=self._round_number,
            actor=self._selection.current_actor.name,
        )

    def _resolve_round(self) -> RoundResult:
        """Resolve the queued round and move on."""
        self.state = BattleState.RESOLUTION
        self._selection.mark_resolving()

        result = self._resolver.resolve(self._selection.round_state, self._round_number)
        self._history.append(result)

        for entry in result.entries:
            self.events.publish(entry.event, **entry.to_event_data())

        if result.outcome:
            self._end_battle(result.outcome)
        else:
            self._open_selection()
        return result

    def _check_battle_end(self) -> Optional[BattleOutcome]:
        """Check if battle should end."""
        if not any(e.is_alive for e in self._enemies):
            return BattleOutcome.VICTORY
        if not any(a.is_alive for a in self._party):
            return BattleOutcome.DEFEAT
        return None

    def _end_battle(self, outcome: BattleOutcome) -> None:
        """Disable input and notify the host exactly once."""
        if self._outcome is not None:
            return

        self._outcome = outcome
        self.state = _OUTCOME_STATES[outcome]
        self._selection.close()

        self.logger.info(
            "Battle ended after %d round(s): %s",
            len(self._history),
            outcome.name,
        )
        self.events.publish(
            BattleEvent.BATTLE_ENDED,
            text=_OUTCOME_MESSAGES[outcome],
            outcome=outcome,
        )

        if self._on_battle_end:
            self._on_battle_end(outcome)

    def end_battle(self) -> None:
        """Clean up after a finished battle."""
        self._party = []
        self._enemies = []
        self._selection = None
        self._resolver = None
        self.state = BattleState.NONE

    def on_battle_end(self, callback: Callable[[BattleOutcome], None]) -> None:
        """Set callback for battle end."""
        self._on_battle_end = callback

    @property
    def is_active(self) -> bool:
        """Check if battle is active."""
        return self.state in (BattleState.SELECTION, BattleState.RESOLUTION)

    @property
    def is_over(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Optional[BattleOutcome]:
        return self._outcome

    @property
    def interactable(self) -> bool:
        """Whether the input surface may submit a choice."""
        return (
            self.state == BattleState.SELECTION
            and self._selection is not None
            and self._selection.interactable
        )

    @property
    def party(self) -> list[BattleUnit]:
        """Get party units."""
        return self._party

    @property
    def enemies(self) -> list[BattleUnit]:
        """Get enemy units."""
        return self._enemies

    @property
    def current_actor(self) -> Optional[BattleUnit]:
        """Get the party member choosing now."""
        if self._selection is None or self.state != BattleState.SELECTION:
            return None
        return self._selection.current_actor

    @property
    def round_number(self) -> int:
        return self._round_number

    @property
    def history(self) -> list[RoundResult]:
        """Resolved rounds, oldest first."""
        return list(self._history)

    @property
    def last_round(self) -> Optional[RoundResult]:
        return self._history[-1] if self._history else None
