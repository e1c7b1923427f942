"""
Command selection - collects one action per living party member.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Sequence

from rpg_framework.battle.actions import CommandKind, QueuedAction
from rpg_framework.battle.actor import ActorSide, BattleUnit


class SubmitStatus(Enum):
    """Outcome of a submitted choice."""
    ACCEPTED = auto()     # queued, more party members still to choose
    ROUND_READY = auto()  # queued, every living party member has chosen
    REJECTED = auto()     # ignored: resolving, or nobody left to choose


@dataclass
class RoundState:
    """Per-round bookkeeping, reset when selection reopens."""
    actions: list[QueuedAction] = field(default_factory=list)
    run_chosen: bool = False
    flee_resolved: bool = False


class SelectionController:
    """
    Tracks whose turn it is to choose during the selection phase.

    Usage:
        selection = SelectionController(party, enemies)
        selection.begin_round()
        status = selection.submit_choice(CommandKind.FIGHT, target_index=1)
        if status == SubmitStatus.ROUND_READY:
            round_state = selection.round_state
    """

    def __init__(self, party: Sequence[BattleUnit], enemies: Sequence[BattleUnit]):
        self._party = party
        self._enemies = enemies
        self._current_index = 0
        self._resolving = False
        self._closed = True
        self.interactable = False
        self.round_state = RoundState()
        self.logger = logging.getLogger(__name__)

    def begin_round(self) -> None:
        """Reset round state and open selection at the first living member."""
        self.round_state = RoundState()
        self._current_index = 0
        self._resolving = False
        self._closed = False
        self.advance_to_next_living_actor()

        if not self.interactable:
            # Empty or wiped party: nothing to choose
            self._closed = True

    def advance_to_next_living_actor(self) -> None:
        """Skip dead roster slots."""
        while (
            self._current_index < len(self._party)
            and self._party[self._current_index].is_dead
        ):
            self._current_index += 1
        self.interactable = self._current_index < len(self._party)

    def submit_choice(
        self,
        command_kind: CommandKind,
        target_index: Optional[int] = 0,
    ) -> SubmitStatus:
        """
        Queue a command for the current party member.

        Args:
            command_kind: The chosen command
            target_index: Enemy roster slot; clamped into range, ignored for Run

        Returns:
            The submission status
        """
        if not (self._resolving or self._closed):
            # The current member may have fallen since the pointer reached them
            self.advance_to_next_living_actor()

        if self._resolving or self._closed or not self.interactable:
            self.logger.debug("Ignoring %s: selection is not open", command_kind.name)
            return SubmitStatus.REJECTED

        target = None
        if command_kind.needs_target:
            target = self._clamp_target(target_index or 0)

        actor = self._party[self._current_index]
        self.round_state.actions.append(
            QueuedAction(
                actor_side=ActorSide.PLAYER,
                actor_index=self._current_index,
                kind=command_kind,
                target_index=target,
            )
        )
        if command_kind == CommandKind.RUN:
            self.round_state.run_chosen = True
        self.logger.debug("%s chooses %s", actor.name, command_kind.label)

        self._current_index += 1
        self.advance_to_next_living_actor()

        if not self.interactable:
            self._closed = True
            return SubmitStatus.ROUND_READY
        return SubmitStatus.ACCEPTED

    def mark_resolving(self) -> None:
        """Block input while the round resolves."""
        self._resolving = True
        self._closed = True
        self.interactable = False

    def close(self) -> None:
        """Stop accepting input for good (battle over)."""
        self._closed = True
        self.interactable = False

    def _clamp_target(self, target_index: int) -> int:
        return max(0, min(target_index, len(self._enemies) - 1))

    @property
    def current_actor(self) -> Optional[BattleUnit]:
        """The party member choosing now, if any."""
        if self._closed or self._current_index >= len(self._party):
            return None
        return self._party[self._current_index]

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_resolving(self) -> bool:
        return self._resolving

    @property
    def queued_actions(self) -> list[QueuedAction]:
        return list(self.round_state.actions)
