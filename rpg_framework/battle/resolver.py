"""
Round resolution - applies one round of queued actions.

Resolution is synchronous and returns the ordered log of what happened;
pacing and display belong to whoever plays the log back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Sequence

from rpg_engine.core.context import BattleOutcome
from rpg_engine.core.events import BattleEvent
from rpg_framework.battle.actions import (
    AttackResult,
    BattleActionExecutor,
    CommandKind,
    QueuedAction,
)
from rpg_framework.battle.actor import BattleUnit, UnitSnapshot
from rpg_framework.battle.selection import RoundState


class RoundPhase(Enum):
    """Phases of one round, in order."""
    RUN_CHECK = auto()
    PLAYER_ACTIONS = auto()
    ENEMY_ACTIONS = auto()
    ROUND_END = auto()


@dataclass(frozen=True)
class BattleLogEntry:
    """
    One discrete thing that happened during a round.

    Attributes:
        event: Event type the entry is published as
        text: Log line for display
        actor: Acting unit name, if any
        target: Target unit name, if any
        damage: Damage dealt, for DAMAGE_DEALT entries
        critical: Whether the hit was critical
        party: Party snapshots, for ROSTER_UPDATED and ROUND_ENDED entries
        enemies: Enemy snapshots, for ROSTER_UPDATED entries
    """
    event: BattleEvent
    text: str = ""
    actor: Optional[str] = None
    target: Optional[str] = None
    damage: Optional[int] = None
    critical: bool = False
    party: tuple[UnitSnapshot, ...] = ()
    enemies: tuple[UnitSnapshot, ...] = ()

    def to_event_data(self) -> dict[str, Any]:
        """Keyword data for publishing on the event bus."""
        return {
            'text': self.text,
            'actor': self.actor,
            'target': self.target,
            'damage': self.damage,
            'critical': self.critical,
            'party': self.party,
            'enemies': self.enemies,
        }


@dataclass
class RoundResult:
    """Everything one resolved round produced."""
    round_number: int
    entries: list[BattleLogEntry] = field(default_factory=list)
    phases: list[RoundPhase] = field(default_factory=list)
    outcome: Optional[BattleOutcome] = None
    flee_attempted: bool = False

    @property
    def damage_entries(self) -> list[BattleLogEntry]:
        return [e for e in self.entries if e.event == BattleEvent.DAMAGE_DEALT]

    @property
    def messages(self) -> list[str]:
        return [e.text for e in self.entries if e.text]


class RoundResolver:
    """
    Resolves one round: RUN_CHECK -> PLAYER_ACTIONS -> ENEMY_ACTIONS -> ROUND_END.

    A successful flee ends the round (and the battle) right after
    RUN_CHECK. Player and enemy phases stop as soon as either side is
    wiped out.
    """

    def __init__(
        self,
        party: Sequence[BattleUnit],
        enemies: Sequence[BattleUnit],
        executor: BattleActionExecutor,
    ):
        self._party = party
        self._enemies = enemies
        self._executor = executor
        self.phase: Optional[RoundPhase] = None
        self.logger = logging.getLogger(__name__)

        self._handlers = {
            RoundPhase.RUN_CHECK: self._run_check,
            RoundPhase.PLAYER_ACTIONS: self._player_actions,
            RoundPhase.ENEMY_ACTIONS: self._enemy_actions,
            RoundPhase.ROUND_END: self._round_end,
        }

    def resolve(self, round_state: RoundState, round_number: int = 1) -> RoundResult:
        """
        Resolve every queued action of the round.

        Args:
            round_state: Actions and flags collected during selection
            round_number: 1-based round counter, for the result

        Returns:
            The ordered round log and, if the battle ended, its outcome
        """
        result = RoundResult(round_number=round_number)
        self.phase = RoundPhase.RUN_CHECK

        while self.phase is not None:
            result.phases.append(self.phase)
            self.phase = self._handlers[self.phase](round_state, result)

        return result

    # Phases

    def _run_check(self, round_state: RoundState, result: RoundResult) -> Optional[RoundPhase]:
        if not round_state.run_chosen or round_state.flee_resolved:
            return RoundPhase.PLAYER_ACTIONS

        round_state.flee_resolved = True
        result.flee_attempted = True

        if self._executor.attempt_flee():
            self.logger.info("Flee attempt succeeded")
            result.entries.append(
                BattleLogEntry(event=BattleEvent.MESSAGE, text="The party ran away!")
            )
            result.outcome = BattleOutcome.ESCAPED
            return None

        self.logger.info("Flee attempt failed")
        result.entries.append(
            BattleLogEntry(event=BattleEvent.MESSAGE, text="Couldn't run!")
        )
        return RoundPhase.PLAYER_ACTIONS

    def _player_actions(self, round_state: RoundState, result: RoundResult) -> RoundPhase:
        for action in round_state.actions:
            if self._either_side_wiped():
                break

            actor = self._party_member(action)
            if actor is None:
                continue

            if action.kind == CommandKind.RUN:
                # Forfeited: a failed flee costs the runner its turn
                self.logger.debug("%s forfeits the turn after a failed flee", actor.name)
                continue

            if action.kind == CommandKind.FIGHT:
                self._resolve_fight(actor, action, result)
            else:
                text = self._executor.execute_placeholder(actor, action.kind)
                result.entries.append(
                    BattleLogEntry(event=BattleEvent.MESSAGE, text=text, actor=actor.name)
                )

            result.entries.append(self._roster_entry())

        return RoundPhase.ENEMY_ACTIONS

    def _enemy_actions(self, round_state: RoundState, result: RoundResult) -> RoundPhase:
        if self._either_side_wiped():
            return RoundPhase.ROUND_END

        for enemy in self._enemies:
            if enemy.is_dead:
                continue

            # Picked at the moment the enemy acts, so never an already-dead member
            target = self._executor.pick_random_target(self._party)
            if target is None:
                break

            attack = self._executor.execute_fight(enemy, target)
            self._log_attack(attack, result)
            result.entries.append(self._roster_entry())

            if self._all_dead(self._party):
                break

        return RoundPhase.ROUND_END

    def _round_end(self, round_state: RoundState, result: RoundResult) -> None:
        party = tuple(u.snapshot() for u in self._party)
        summary = ", ".join(f"{s.name} HP {s.current_hp}/{s.max_hp}" for s in party)
        result.entries.append(
            BattleLogEntry(event=BattleEvent.ROUND_ENDED, text=summary, party=party)
        )

        if self._all_dead(self._enemies):
            result.outcome = BattleOutcome.VICTORY
        elif self._all_dead(self._party):
            result.outcome = BattleOutcome.DEFEAT
        return None

    # Helpers

    def _resolve_fight(
        self,
        actor: BattleUnit,
        action: QueuedAction,
        result: RoundResult,
    ) -> None:
        target = self._resolve_target(action.target_index)
        if target is None:
            result.entries.append(
                BattleLogEntry(
                    event=BattleEvent.MESSAGE,
                    text="Ineffective.",
                    actor=actor.name,
                )
            )
            return

        attack = self._executor.execute_fight(actor, target)
        self._log_attack(attack, result)

    def _resolve_target(self, target_index: Optional[int]) -> Optional[BattleUnit]:
        """The chosen enemy if still alive, else the first living one."""
        if target_index is not None and 0 <= target_index < len(self._enemies):
            chosen = self._enemies[target_index]
            if chosen.is_alive:
                return chosen
        for enemy in self._enemies:
            if enemy.is_alive:
                return enemy
        return None

    def _log_attack(self, attack: AttackResult, result: RoundResult) -> None:
        text = f"{attack.attacker} hits {attack.defender} for {attack.damage}."
        if attack.critical:
            text = f"Critical hit! {text}"
        self.logger.debug(
            "%s -> %s: base=%d roll=%+d crit=%s damage=%d hp=%d",
            attack.attacker,
            attack.defender,
            attack.base,
            attack.roll,
            attack.critical,
            attack.damage,
            attack.defender_hp,
        )

        result.entries.append(
            BattleLogEntry(
                event=BattleEvent.DAMAGE_DEALT,
                text=text,
                actor=attack.attacker,
                target=attack.defender,
                damage=attack.damage,
                critical=attack.critical,
            )
        )
        if attack.defeated:
            result.entries.append(
                BattleLogEntry(
                    event=BattleEvent.MESSAGE,
                    text=f"{attack.defender} is defeated.",
                    target=attack.defender,
                )
            )

    def _roster_entry(self) -> BattleLogEntry:
        return BattleLogEntry(
            event=BattleEvent.ROSTER_UPDATED,
            party=tuple(u.snapshot() for u in self._party),
            enemies=tuple(u.snapshot() for u in self._enemies),
        )

    def _party_member(self, action: QueuedAction) -> Optional[BattleUnit]:
        if not 0 <= action.actor_index < len(self._party):
            return None
        actor = self._party[action.actor_index]
        return actor if actor.is_alive else None

    def _either_side_wiped(self) -> bool:
        return self._all_dead(self._party) or self._all_dead(self._enemies)

    @staticmethod
    def _all_dead(roster: Sequence[BattleUnit]) -> bool:
        # An empty roster counts as wiped out
        return all(u.is_dead for u in roster)
