import random
import pytest
from rpg_engine.core.context import BattleOutcome, GameContext, GameMode
from rpg_engine.core.events import BattleEvent
from rpg_framework.battle.actions import CommandKind
from rpg_framework.battle.actor import UnitData
from rpg_framework.battle.selection import SubmitStatus
from rpg_framework.battle.system import BattleState, BattleSystem

FIGHTER = UnitData(name="Fighter", max_hp=36, attack=10, defense=6)
IMP = UnitData(name="Imp", max_hp=18, attack=6, defense=2)


class Recorder:
    """Collects every battle event in publish order."""

    def __init__(self, event_bus):
        self.events = []
        event_bus.subscribe_all(BattleEvent, self.events.append, weak=False)

    def of(self, event_type):
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def recorder(event_bus):
    return Recorder(event_bus)


def test_start_battle_opens_selection(event_bus, recorder, party_data, enemy_data, scripted_rng):
    battle = BattleSystem(event_bus, rng=scripted_rng())

    assert battle.start_battle(party_data, enemy_data)

    assert battle.state == BattleState.SELECTION
    assert battle.is_active
    assert battle.interactable
    assert battle.round_number == 1
    assert battle.current_actor.name == "Fighter"
    assert [e.type for e in recorder.events] == [
        BattleEvent.BATTLE_STARTED,
        BattleEvent.SELECTION_OPENED,
    ]
    assert recorder.events[0]["text"] == "A battle begins!"

def test_cannot_start_twice(event_bus, party_data, enemy_data):
    battle = BattleSystem(event_bus)
    battle.start_battle(party_data, enemy_data)
    assert not battle.start_battle(party_data, enemy_data)

def test_submit_before_start_is_rejected(event_bus):
    battle = BattleSystem(event_bus)
    assert battle.submit_choice(CommandKind.FIGHT) == SubmitStatus.REJECTED

def test_choices_are_announced(event_bus, recorder, party_data, enemy_data, scripted_rng):
    battle = BattleSystem(event_bus, rng=scripted_rng())
    battle.start_battle(party_data, enemy_data)

    assert battle.submit_choice(CommandKind.FIGHT, 2) == SubmitStatus.ACCEPTED

    queued = recorder.of(BattleEvent.CHOICE_QUEUED)
    assert queued[0]["text"] == "Fighter chooses Fight."
    assert battle.current_actor.name == "Thief"

def test_scenario_single_fighter_wins_in_two_rounds(event_bus, recorder, scripted_rng):
    # Every variance roll is +1 and no hit is critical: 9 damage per swing.
    # A 0 roll would leave the Imp at 2 HP after two 8-damage swings.
    battle = BattleSystem(event_bus, rng=scripted_rng(default_int=1))
    outcomes = []
    battle.on_battle_end(outcomes.append)
    battle.start_battle([FIGHTER], [IMP])

    battle.submit_choice(CommandKind.FIGHT, 0)
    assert battle.enemies[0].current_hp == 9
    assert battle.state == BattleState.SELECTION

    battle.submit_choice(CommandKind.FIGHT, 0)

    assert outcomes == [BattleOutcome.VICTORY]
    assert battle.state == BattleState.VICTORY
    assert battle.round_number == 2
    assert battle.enemies[0].is_dead
    assert recorder.of(BattleEvent.BATTLE_ENDED)[0]["text"] == "Victory!"

def test_scenario_party_escapes_without_damage(event_bus, recorder, scripted_rng):
    context = GameContext(event_bus)
    battle = BattleSystem(event_bus, rng=scripted_rng(randoms=[0.1]))
    battle.on_battle_end(context.on_battle_end)
    context.enter_battle()
    battle.start_battle([FIGHTER], [IMP])

    battle.submit_choice(CommandKind.RUN)

    assert battle.outcome == BattleOutcome.ESCAPED
    assert battle.state == BattleState.FLED
    assert recorder.of(BattleEvent.DAMAGE_DEALT) == []
    assert context.last_outcome == BattleOutcome.ESCAPED
    assert context.mode == GameMode.OVERWORLD

def test_failed_flee_continues_battle(event_bus, scripted_rng):
    battle = BattleSystem(event_bus, rng=scripted_rng(randoms=[0.9]))
    battle.start_battle([FIGHTER], [IMP])

    battle.submit_choice(CommandKind.RUN)

    assert battle.outcome is None
    assert battle.state == BattleState.SELECTION
    assert battle.round_number == 2
    assert battle.enemies[0].current_hp == 18
    assert "Couldn't run!" in battle.last_round.messages

def test_defeat_ends_in_game_over(event_bus, scripted_rng):
    context = GameContext(event_bus)
    battle = BattleSystem(event_bus, rng=scripted_rng())
    battle.on_battle_end(context.on_battle_end)
    context.enter_battle()
    battle.start_battle(
        [UnitData(name="Squire", max_hp=5, attack=1, defense=0)],
        [UnitData(name="Dragon", max_hp=200, attack=50, defense=10)],
    )

    battle.submit_choice(CommandKind.FIGHT)

    assert battle.outcome == BattleOutcome.DEFEAT
    assert context.mode == GameMode.GAME_OVER

def test_input_disabled_after_battle_end(event_bus, scripted_rng):
    battle = BattleSystem(event_bus, rng=scripted_rng(randoms=[0.1]))
    battle.start_battle([FIGHTER], [IMP])
    battle.submit_choice(CommandKind.RUN)

    assert not battle.interactable
    assert battle.current_actor is None
    assert battle.submit_choice(CommandKind.FIGHT) == SubmitStatus.REJECTED

@pytest.mark.parametrize("party, enemies, outcome", [
    ([FIGHTER], [], BattleOutcome.VICTORY),
    ([], [IMP], BattleOutcome.DEFEAT),
])
def test_empty_roster_ends_battle_at_start(event_bus, party, enemies, outcome):
    outcomes = []
    battle = BattleSystem(event_bus)
    battle.on_battle_end(outcomes.append)

    assert battle.start_battle(party, enemies)

    assert outcomes == [outcome]
    assert battle.round_number == 0
    assert not battle.interactable

def test_full_battle_notifies_once(event_bus, party_data, enemy_data):
    outcomes = []
    battle = BattleSystem(event_bus, rng=random.Random(2024))
    battle.on_battle_end(outcomes.append)
    battle.start_battle(party_data, enemy_data)

    while battle.interactable and battle.round_number < 100:
        target = next(i for i, e in enumerate(battle.enemies) if e.is_alive)
        battle.submit_choice(CommandKind.FIGHT, target)

    assert len(outcomes) == 1
    assert battle.is_over
    if outcomes[0] == BattleOutcome.VICTORY:
        assert all(e.is_dead for e in battle.enemies)
    else:
        assert all(p.is_dead for p in battle.party)

def test_dead_members_do_not_choose(event_bus, recorder, scripted_rng):
    battle = BattleSystem(event_bus, rng=scripted_rng())
    battle.start_battle(
        [FIGHTER, UnitData(name="Thief", max_hp=28, attack=8, defense=5)],
        [UnitData(name="Wolf", max_hp=300, attack=0, defense=0)],
    )
    # Fighter falls while it is up to choose
    battle.party[0].take_damage(36)

    assert battle.submit_choice(CommandKind.FIGHT) == SubmitStatus.ROUND_READY

    queued = recorder.of(BattleEvent.CHOICE_QUEUED)
    assert [e["actor"] for e in queued] == ["Thief"]
    assert [e.actor for e in battle.last_round.damage_entries][0] == "Thief"
    assert battle.round_number == 2
    assert battle.current_actor.name == "Thief"

def test_end_battle_allows_new_battle(event_bus, scripted_rng):
    battle = BattleSystem(event_bus, rng=scripted_rng(randoms=[0.1]))
    battle.start_battle([FIGHTER], [IMP])
    battle.submit_choice(CommandKind.RUN)

    battle.end_battle()

    assert battle.state == BattleState.NONE
    assert battle.party == []
    assert battle.start_battle([FIGHTER], [IMP])
    assert battle.outcome is None
