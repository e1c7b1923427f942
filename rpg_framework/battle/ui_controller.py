"""
Battle UI Controller - presentation state for a battle.

Listens to battle events and keeps what a HUD would show:
- Party/enemy status lines
- The single most recent battle message (each one replaces the last)
- Enemy target options
- Whether command input is currently accepted
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from rpg_engine.core.context import BattleOutcome
from rpg_engine.core.events import BattleEvent, Event, EventBus
from rpg_framework.battle.actor import UnitSnapshot

if TYPE_CHECKING:
    from rpg_framework.battle.system import BattleSystem


def format_unit_line(snapshot: UnitSnapshot) -> str:
    """Status line for one unit, e.g. ``Fighter  HP 30/36``."""
    return f"{snapshot.name}  HP {snapshot.current_hp}/{snapshot.max_hp}"


class BattleUIController:
    """
    Presentation sink for battle events.

    Usage:
        battle_ui = BattleUIController(event_bus, battle)
        battle_ui.on_message(print)

        # Draw
        for line in battle_ui.render_lines():
            ...
    """

    def __init__(self, event_bus: EventBus, battle: Optional[BattleSystem] = None):
        self.event_bus = event_bus
        self.battle = battle

        # Displayed state
        self.message: str = ""
        self.round_summary: str = ""
        self.round_number: int = 0
        self.prompt_actor: Optional[str] = None
        self.outcome: Optional[BattleOutcome] = None
        self._party: tuple[UnitSnapshot, ...] = ()
        self._enemies: tuple[UnitSnapshot, ...] = ()

        # Callbacks
        self._on_message: Optional[Callable[[str], None]] = None
        self._on_victory: Optional[Callable[[], None]] = None
        self._on_defeat: Optional[Callable[[], None]] = None

        self._subscribe()

    def on_message(self, callback: Callable[[str], None]) -> None:
        """Set callback invoked whenever the displayed message changes."""
        self._on_message = callback

    def on_victory(self, callback: Callable[[], None]) -> None:
        """Set victory callback."""
        self._on_victory = callback

    def on_defeat(self, callback: Callable[[], None]) -> None:
        """Set defeat callback."""
        self._on_defeat = callback

    def _subscribe(self) -> None:
        bus = self.event_bus
        bus.subscribe(BattleEvent.BATTLE_STARTED, self._handle_battle_started)
        bus.subscribe(BattleEvent.SELECTION_OPENED, self._handle_selection_opened)
        bus.subscribe(BattleEvent.CHOICE_QUEUED, self._handle_message)
        bus.subscribe(BattleEvent.MESSAGE, self._handle_message)
        bus.subscribe(BattleEvent.DAMAGE_DEALT, self._handle_message)
        bus.subscribe(BattleEvent.ROSTER_UPDATED, self._handle_roster_updated)
        bus.subscribe(BattleEvent.ROUND_ENDED, self._handle_round_ended)
        bus.subscribe(BattleEvent.BATTLE_ENDED, self._handle_battle_ended)

    # Event handlers

    def _handle_battle_started(self, event: Event) -> None:
        self._party = tuple(event.get('party', ()))
        self._enemies = tuple(event.get('enemies', ()))
        self.outcome = None
        self.round_number = 0
        self._show(event.get('text', ""))

    def _handle_selection_opened(self, event: Event) -> None:
        self.round_number = event.get('round_number', self.round_number)
        self.prompt_actor = event.get('actor')

    def _handle_message(self, event: Event) -> None:
        self._show(event.get('text', ""))

    def _handle_roster_updated(self, event: Event) -> None:
        self._party = tuple(event.get('party', self._party))
        self._enemies = tuple(event.get('enemies', self._enemies))

    def _handle_round_ended(self, event: Event) -> None:
        self.round_summary = event.get('text', "")
        self.prompt_actor = None
        party = event.get('party')
        if party:
            self._party = tuple(party)

    def _handle_battle_ended(self, event: Event) -> None:
        self.outcome = event.get('outcome')
        self.prompt_actor = None
        self._show(event.get('text', ""))

        if self.outcome == BattleOutcome.VICTORY and self._on_victory:
            self._on_victory()
        elif self.outcome == BattleOutcome.DEFEAT and self._on_defeat:
            self._on_defeat()

    def _show(self, text: str) -> None:
        """Replace the displayed message."""
        if not text:
            return
        self.message = text
        if self._on_message:
            self._on_message(text)

    # Views

    @property
    def interactable(self) -> bool:
        """Whether command buttons and the target list accept input."""
        if self.battle is None or self.outcome is not None:
            return False
        return self.battle.interactable

    @property
    def party_lines(self) -> list[str]:
        return [format_unit_line(s) for s in self._party]

    @property
    def enemy_lines(self) -> list[str]:
        return [format_unit_line(s) for s in self._enemies]

    @property
    def target_options(self) -> list[str]:
        """Numbered enemy list, one entry per roster slot."""
        return [f"{i + 1}. {s.name}" for i, s in enumerate(self._enemies)]

    def render_lines(self) -> list[str]:
        """Text HUD: party, enemies, then the current message."""
        lines = list(self.party_lines)
        lines.append("")
        lines.extend(self.enemy_lines)
        lines.append("")
        lines.append(self.message)
        return lines
