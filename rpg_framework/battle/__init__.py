"""
Battle module - party-vs-group turn-based combat.

Provides:
- Battle units (party members, enemies)
- Commands and the damage model
- Command selection (one per living party member)
- Round resolution (flee check, party actions, enemy actions, round end)
- Victory/defeat/escape detection
"""

from rpg_framework.battle.actor import (
    ActorSide,
    BattleUnit,
    UnitData,
    UnitSnapshot,
    create_battle_unit,
    create_roster,
    load_encounter,
)
from rpg_framework.battle.actions import (
    AttackResult,
    BattleActionExecutor,
    CommandKind,
    QueuedAction,
    RandomSource,
    resolve_attack,
    roll_attack,
)
from rpg_framework.battle.config import BattleConfig, DEFAULT_CONFIG
from rpg_framework.battle.selection import (
    RoundState,
    SelectionController,
    SubmitStatus,
)
from rpg_framework.battle.resolver import (
    BattleLogEntry,
    RoundPhase,
    RoundResolver,
    RoundResult,
)
from rpg_framework.battle.system import BattleState, BattleSystem
from rpg_framework.battle.ui_controller import BattleUIController

__all__ = [
    # Units
    "ActorSide",
    "BattleUnit",
    "UnitData",
    "UnitSnapshot",
    "create_battle_unit",
    "create_roster",
    "load_encounter",
    # Actions
    "AttackResult",
    "BattleActionExecutor",
    "CommandKind",
    "QueuedAction",
    "RandomSource",
    "resolve_attack",
    "roll_attack",
    # Config
    "BattleConfig",
    "DEFAULT_CONFIG",
    # Selection
    "RoundState",
    "SelectionController",
    "SubmitStatus",
    # Resolution
    "BattleLogEntry",
    "RoundPhase",
    "RoundResolver",
    "RoundResult",
    # System
    "BattleState",
    "BattleSystem",
    "BattleUIController",
]
