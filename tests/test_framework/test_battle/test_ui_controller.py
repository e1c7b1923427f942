import pytest
from rpg_engine.core.context import BattleOutcome
from rpg_engine.core.events import BattleEvent
from rpg_framework.battle.actions import CommandKind
from rpg_framework.battle.actor import ActorSide, UnitData, UnitSnapshot
from rpg_framework.battle.system import BattleSystem
from rpg_framework.battle.ui_controller import BattleUIController, format_unit_line


@pytest.fixture
def battle(event_bus, scripted_rng):
    return BattleSystem(event_bus, rng=scripted_rng())


@pytest.fixture
def battle_ui(event_bus, battle):
    return BattleUIController(event_bus, battle)


def test_format_unit_line():
    snap = UnitSnapshot("Fighter", ActorSide.PLAYER, 0, 30, 36, True)
    assert format_unit_line(snap) == "Fighter  HP 30/36"


def test_battle_start_populates_lines(battle, battle_ui, party_data, enemy_data):
    battle.start_battle(party_data, enemy_data)

    assert battle_ui.party_lines[0] == "Fighter  HP 36/36"
    assert battle_ui.enemy_lines == ["Imp  HP 18/18", "Imp  HP 18/18", "Wolf  HP 34/34"]
    assert battle_ui.target_options == ["1. Imp", "2. Imp", "3. Wolf"]
    assert battle_ui.message == "A battle begins!"
    assert battle_ui.prompt_actor == "Fighter"
    assert battle_ui.round_number == 1
    assert battle_ui.interactable


def test_each_message_replaces_the_last(event_bus, battle_ui):
    shown = []
    battle_ui.on_message(shown.append)

    event_bus.publish(BattleEvent.MESSAGE, text="Couldn't run!")
    event_bus.publish(BattleEvent.DAMAGE_DEALT, text="Imp hits Fighter for 2.")

    assert battle_ui.message == "Imp hits Fighter for 2."
    assert shown == ["Couldn't run!", "Imp hits Fighter for 2."]


def test_empty_text_keeps_current_message(event_bus, battle_ui):
    event_bus.publish(BattleEvent.MESSAGE, text="Ineffective.")
    event_bus.publish(BattleEvent.MESSAGE, text="")

    assert battle_ui.message == "Ineffective."


def test_roster_updates_refresh_lines(battle, battle_ui, scripted_rng):
    battle.start_battle(
        [UnitData(name="Fighter", max_hp=36, attack=10, defense=6)],
        [UnitData(name="Wolf", max_hp=34, attack=9, defense=4)],
    )

    battle.submit_choice(CommandKind.FIGHT, 0)

    wolf = battle.enemies[0]
    fighter = battle.party[0]
    assert battle_ui.enemy_lines == [f"Wolf  HP {wolf.current_hp}/34"]
    assert battle_ui.party_lines == [f"Fighter  HP {fighter.current_hp}/36"]
    assert battle_ui.round_summary == f"Fighter HP {fighter.current_hp}/36"


def test_victory_disables_input_and_notifies(battle, battle_ui):
    wins = []
    battle_ui.on_victory(lambda: wins.append(True))
    battle.start_battle(
        [UnitData(name="Fighter", max_hp=36, attack=50, defense=6)],
        [UnitData(name="Imp", max_hp=18, attack=6, defense=2)],
    )

    battle.submit_choice(CommandKind.FIGHT, 0)

    assert wins == [True]
    assert battle_ui.outcome == BattleOutcome.VICTORY
    assert battle_ui.message == "Victory!"
    assert not battle_ui.interactable
    assert battle_ui.prompt_actor is None


def test_defeat_notifies(battle, battle_ui):
    losses = []
    battle_ui.on_defeat(lambda: losses.append(True))
    battle.start_battle(
        [UnitData(name="Squire", max_hp=1, attack=1, defense=0)],
        [UnitData(name="Dragon", max_hp=200, attack=50, defense=10)],
    )

    battle.submit_choice(CommandKind.FIGHT, 0)

    assert losses == [True]
    assert battle_ui.message == "Party wiped..."


def test_not_interactable_without_battle(event_bus):
    battle_ui = BattleUIController(event_bus)
    assert not battle_ui.interactable


def test_render_lines(battle, battle_ui):
    battle.start_battle(
        [UnitData(name="Fighter", max_hp=36, attack=10, defense=6)],
        [UnitData(name="Imp", max_hp=18, attack=6, defense=2)],
    )

    assert battle_ui.render_lines() == [
        "Fighter  HP 36/36",
        "",
        "Imp  HP 18/18",
        "",
        "A battle begins!",
    ]
