import os
import sys
import pytest

# Ensure project modules can be imported
sys.path.append(os.getcwd())


class ScriptedRng:
    """
    Stand-in for random.Random that replays queued values.

    random() pops from ``randoms`` (default: no crit, failed flee),
    randint() pops from ``ints`` (clamped into range),
    choice() pops an index from ``choices`` (default: first element).
    """

    def __init__(self, randoms=(), ints=(), choices=(), default_random=0.99, default_int=0):
        self.randoms = list(randoms)
        self.ints = list(ints)
        self.choices = list(choices)
        self.default_random = default_random
        self.default_int = default_int
        self.calls = []

    def random(self):
        self.calls.append("random")
        return self.randoms.pop(0) if self.randoms else self.default_random

    def randint(self, a, b):
        self.calls.append("randint")
        value = self.ints.pop(0) if self.ints else self.default_int
        return max(a, min(b, value))

    def choice(self, seq):
        self.calls.append("choice")
        index = self.choices.pop(0) if self.choices else 0
        return seq[index]


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRng instances."""
    return ScriptedRng


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from rpg_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def make_unit():
    """Factory: make_unit("Imp", hp=18, attack=6, defense=2, side=ActorSide.ENEMY)."""
    from rpg_framework.battle.actor import ActorSide, UnitData, create_battle_unit

    def _make(name, hp=30, attack=10, defense=5, side=ActorSide.PLAYER, position=0, current=None):
        unit = create_battle_unit(UnitData(name=name, max_hp=hp, attack=attack, defense=defense), side, position)
        if current is not None:
            unit.health.current = current
        return unit

    return _make


@pytest.fixture
def party_data():
    """The four heroes of the first battle."""
    from rpg_framework.battle.actor import UnitData
    return [
        UnitData(name="Fighter", max_hp=36, attack=10, defense=6),
        UnitData(name="Thief", max_hp=28, attack=8, defense=5),
        UnitData(name="W. Mage", max_hp=24, attack=5, defense=4),
        UnitData(name="B. Mage", max_hp=22, attack=4, defense=3),
    ]


@pytest.fixture
def enemy_data():
    from rpg_framework.battle.actor import UnitData
    return [
        UnitData(name="Imp", max_hp=18, attack=6, defense=2),
        UnitData(name="Imp", max_hp=18, attack=6, defense=2),
        UnitData(name="Wolf", max_hp=34, attack=9, defense=4),
    ]
