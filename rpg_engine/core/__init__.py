"""
Core engine module.

Exports:
- Component, register_component: Validated data component base and registration
- EventBus, Event, EngineEvent, BattleEvent: Event system
- GameContext, GameMode, BattleOutcome: Host-side game state
"""

from rpg_engine.core.component import Component, register_component, get_component_type
from rpg_engine.core.events import EventBus, Event, EngineEvent, BattleEvent
from rpg_engine.core.context import GameContext, GameMode, BattleOutcome

__all__ = [
    # Components
    "Component",
    "register_component",
    "get_component_type",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    "BattleEvent",
    # Host
    "GameContext",
    "GameMode",
    "BattleOutcome",
]
