"""
Battle units - participants in combat.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Iterable, Optional

from rpg_framework.components import CharacterStats, Health

if TYPE_CHECKING:
    from rpg_engine.resources.database import Database


class ActorSide(Enum):
    """Which roster a unit belongs to."""
    PLAYER = auto()
    ENEMY = auto()

    @property
    def opponent(self) -> ActorSide:
        return ActorSide.ENEMY if self is ActorSide.PLAYER else ActorSide.PLAYER


@dataclass(frozen=True)
class UnitSnapshot:
    """Point-in-time view of a unit for presentation."""
    name: str
    side: ActorSide
    position_index: int
    current_hp: int
    max_hp: int
    is_alive: bool


@dataclass
class BattleUnit:
    """
    A participant in battle.

    Units keep their roster slot for the whole battle. A dead unit
    stays in place and is skipped by selection and targeting.
    """
    name: str
    side: ActorSide
    stats: CharacterStats
    health: Health
    position_index: int = 0

    @property
    def is_alive(self) -> bool:
        """Check if unit is alive."""
        return not self.health.is_dead

    @property
    def is_dead(self) -> bool:
        return self.health.is_dead

    @property
    def is_player_controlled(self) -> bool:
        return self.side == ActorSide.PLAYER

    @property
    def current_hp(self) -> int:
        return self.health.current

    @property
    def max_hp(self) -> int:
        return self.health.max_hp

    @property
    def attack(self) -> int:
        return self.stats.attack

    @property
    def defense(self) -> int:
        return self.stats.defense

    def take_damage(self, amount: int) -> int:
        """
        Take damage.

        Returns:
            Actual health removed
        """
        return self.health.take_damage(amount)

    def snapshot(self) -> UnitSnapshot:
        """Capture the unit's current state."""
        return UnitSnapshot(
            name=self.name,
            side=self.side,
            position_index=self.position_index,
            current_hp=self.current_hp,
            max_hp=self.max_hp,
            is_alive=self.is_alive,
        )


@dataclass
class UnitData:
    """Static data for a unit, party member or enemy."""
    name: str
    max_hp: int
    attack: int
    defense: int
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UnitData:
        """Build from a definition dict; accepts ``hp`` or ``max_hp``."""
        max_hp = data["max_hp"] if "max_hp" in data else data["hp"]
        return cls(
            name=data["name"],
            max_hp=max_hp,
            attack=data["attack"],
            defense=data["defense"],
            id=data.get("id"),
        )


def create_battle_unit(
    unit_data: UnitData,
    side: ActorSide,
    position: int = 0,
) -> BattleUnit:
    """Create a BattleUnit at full health from unit data."""
    return BattleUnit(
        name=unit_data.name,
        side=side,
        stats=CharacterStats(attack=unit_data.attack, defense=unit_data.defense),
        health=Health.full(unit_data.max_hp),
        position_index=position,
    )


def create_roster(
    unit_data: Iterable[UnitData | dict[str, Any]],
    side: ActorSide,
) -> list[BattleUnit]:
    """Create a roster, numbering slots in the given order."""
    roster = []
    for position, data in enumerate(unit_data):
        if isinstance(data, dict):
            data = UnitData.from_dict(data)
        roster.append(create_battle_unit(data, side, position))
    return roster


def load_encounter(
    database: Database,
    encounter_id: str,
) -> tuple[list[UnitData], list[UnitData]]:
    """
    Resolve an encounter definition into party and enemy unit data.

    Raises:
        KeyError: If the encounter or any referenced unit is unknown
    """
    encounter = database.get_encounter(encounter_id)
    if encounter is None:
        raise KeyError(f"Unknown encounter: {encounter_id}")

    party = [
        UnitData.from_dict(d)
        for d in database.get_roster("party", encounter["party"])
    ]
    enemies = [
        UnitData.from_dict(d)
        for d in database.get_roster("enemies", encounter["enemies"])
    ]
    return party, enemies
