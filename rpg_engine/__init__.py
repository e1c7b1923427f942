"""
RPG Engine

Engine layer for the party battle resolver: validated data components,
a typed event bus, the host game context and the static data database.

Quick Start:
    from rpg_engine.core import EventBus, GameContext

    events = EventBus()
    context = GameContext(events)
"""

__version__ = "0.1.0"
__author__ = "Developer"

# Re-export core components for convenience
from rpg_engine.core import (
    Component,
    register_component,
    EventBus,
    Event,
    EngineEvent,
    BattleEvent,
    GameContext,
    GameMode,
    BattleOutcome,
)

__all__ = [
    # Components
    "Component",
    "register_component",
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
