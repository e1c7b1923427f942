"""
Battle actions - queued commands and the damage model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol, Sequence, TypeVar

from rpg_framework.battle.actor import ActorSide, BattleUnit
from rpg_framework.battle.config import BattleConfig, DEFAULT_CONFIG

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of ``random.Random`` that battles draw from."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[T]) -> T: ...


class CommandKind(Enum):
    """Commands a party member can choose."""
    FIGHT = auto()
    RUN = auto()
    MAGIC = auto()
    ITEM = auto()

    @property
    def needs_target(self) -> bool:
        return self is not CommandKind.RUN

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class QueuedAction:
    """
    One intent for the current round.

    The target index is what was chosen at queue time; it is checked
    again when the action resolves.
    """
    actor_side: ActorSide
    actor_index: int
    kind: CommandKind
    target_index: Optional[int] = None


@dataclass(frozen=True)
class AttackResult:
    """Result of one resolved attack."""
    attacker: str
    defender: str
    base: int
    variance: int
    roll: int
    pre_critical: int
    critical: bool
    damage: int
    defender_hp: int

    @property
    def defeated(self) -> bool:
        return self.defender_hp == 0


def roll_attack(
    attacker: BattleUnit,
    defender: BattleUnit,
    rng: RandomSource,
    config: BattleConfig = DEFAULT_CONFIG,
) -> AttackResult:
    """
    Roll an attack and apply it to the defender.

    base     = max(1, attack - defense)
    variance = max(1, round(base * 0.2))
    damage   = base + randint(-variance, variance)
    critical: damage = round(damage * 1.5)
    damage is floored at 1, health at 0.
    """
    base = max(config.minimum_damage, attacker.attack - defender.defense)
    variance = max(1, round(base * config.variance_ratio))
    roll = rng.randint(-variance, variance)
    damage = base + roll
    pre_critical = damage

    critical = rng.random() < config.critical_chance
    if critical:
        damage = round(damage * config.critical_multiplier)

    damage = max(config.minimum_damage, damage)
    defender.take_damage(damage)

    return AttackResult(
        attacker=attacker.name,
        defender=defender.name,
        base=base,
        variance=variance,
        roll=roll,
        pre_critical=pre_critical,
        critical=critical,
        damage=damage,
        defender_hp=defender.current_hp,
    )


def resolve_attack(
    attacker: BattleUnit,
    defender: BattleUnit,
    rng: RandomSource,
    config: BattleConfig = DEFAULT_CONFIG,
) -> int:
    """Apply an attack and return the damage dealt."""
    return roll_attack(attacker, defender, rng, config).damage


class BattleActionExecutor:
    """
    Executes battle actions with one RNG and one config.
    """

    def __init__(self, rng: RandomSource, config: BattleConfig = DEFAULT_CONFIG):
        self.rng = rng
        self.config = config

    def execute_fight(self, attacker: BattleUnit, defender: BattleUnit) -> AttackResult:
        """Execute a basic attack."""
        return roll_attack(attacker, defender, self.rng, self.config)

    def execute_placeholder(self, actor: BattleUnit, kind: CommandKind) -> str:
        """Magic and items have no effect yet; only describe the attempt."""
        return f"{actor.name} tries {kind.label}, but nothing happens."

    def attempt_flee(self) -> bool:
        """Roll the party-wide escape."""
        return self.rng.random() < self.config.flee_chance

    def pick_random_target(self, roster: Sequence[BattleUnit]) -> Optional[BattleUnit]:
        """Pick a uniformly random living unit, or None."""
        living = [u for u in roster if u.is_alive]
        if not living:
            return None
        return self.rng.choice(living)
