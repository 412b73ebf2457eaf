from dataclasses import dataclass, field
from typing import List

import pytest

from isles.domain.defs import EnemyDef
from isles.domain.entities import Player, Stats
from isles.services.combat_service import (
    AttackResolvedEvent,
    CombatService,
    RewardsGrantedEvent,
    compute_damage,
    hit_chance,
    is_critical,
    is_hit,
    turn_order,
)
from isles.services.errors import CombatContractError


@dataclass
class _ScriptedRNG:
    """Feeds fixed percent draws to the resolver."""

    draws: List[float] = field(default_factory=list)

    def percent(self) -> float:
        return self.draws.pop(0)

    def randint(self, a: int, b: int) -> int:
        return a


def _make_player(hp: int = 25, speed: int = 8, luck: int = 10) -> Player:
    return Player(name="Player", stats=Stats(max_hp=25, hp=hp, attack=5, defense=2, speed=speed, luck=luck))


def _make_template(max_hp: int = 12, speed: int = 5, attack: int = 3) -> EnemyDef:
    return EnemyDef(
        id="shore_slime",
        name="Shore Slime",
        max_hp=max_hp,
        attack=attack,
        defense=3,
        speed=speed,
        luck=3,
        xp=10,
        gold=10,
    )


def test_damage_formula_and_floor() -> None:
    assert compute_damage(5, 2, critical=False) == 3
    assert compute_damage(5, 2, critical=True) == 13
    assert compute_damage(1, 10, critical=False) == 1


def test_hit_chance_thresholds() -> None:
    assert hit_chance(10) == 90
    assert is_hit(89.99, 10) is True
    assert is_hit(90.0, 10) is False
    assert hit_chance(100) == 0
    assert is_hit(0.0, 100) is False


def test_critical_threshold_is_half_speed() -> None:
    assert is_critical(3.9, 8) is True
    assert is_critical(4.0, 8) is False


def test_turn_order_by_speed() -> None:
    assert turn_order(8, 5) == ("player", "enemy")
    assert turn_order(5, 8) == ("enemy", "player")
    assert turn_order(5, 5) == ("player", "enemy")


def test_begin_clones_template_at_full_health() -> None:
    service = CombatService()
    template = _make_template()
    combat, lines = service.begin(_make_player(), template, _ScriptedRNG())

    assert lines == ["A Shore Slime approaches!"]
    assert combat.phase == "in_progress"
    assert combat.turn == 0
    assert combat.enemy.stats.hp == template.max_hp
    combat.enemy.stats.hp = 1
    assert template.max_hp == 12


def test_begin_while_in_progress_is_rejected() -> None:
    service = CombatService()
    player = _make_player()
    combat, _ = service.begin(player, _make_template(), _ScriptedRNG())

    with pytest.raises(CombatContractError):
        service.begin(player, _make_template(), _ScriptedRNG(), active=combat)
    assert combat.phase == "in_progress"


def test_round_with_two_misses_stays_in_progress() -> None:
    service = CombatService()
    player = _make_player()
    combat, _ = service.begin(player, _make_template(), _ScriptedRNG())

    result = service.resolve_round(combat, player, "attack", _ScriptedRNG(draws=[99.0, 99.0]))

    assert result.outcome == "in_progress"
    assert combat.turn == 1
    assert result.log_lines == [
        "-> Turn 1",
        "Player attacks! Player missed! Player deals 0 hp damage.",
        "Shore Slime attacks! Shore Slime missed! Shore Slime deals 0 hp damage.",
    ]
    assert result.player_hp == 25
    assert result.enemy_hp == 12


def test_round_applies_damage_in_speed_order() -> None:
    service = CombatService()
    player = _make_player(speed=4)
    combat, _ = service.begin(player, _make_template(speed=5), _ScriptedRNG())

    # enemy hits without crit, then player hits with a crit
    result = service.resolve_round(combat, player, "attack", _ScriptedRNG(draws=[0.0, 99.0, 0.0, 0.0]))

    attacks = [event for event in result.events if isinstance(event, AttackResolvedEvent)]
    assert [event.attacker_name for event in attacks] == ["Shore Slime", "Player"]
    assert attacks[0].damage == 1
    assert attacks[1].critical is True
    assert attacks[1].damage == 12
    assert "CRITICAL DAMAGE!" in result.log_lines[2]
    assert player.stats.hp == 24


def test_win_grants_rewards_exactly_once() -> None:
    service = CombatService()
    player = _make_player()
    combat, _ = service.begin(player, _make_template(max_hp=2), _ScriptedRNG())

    result = service.resolve_round(combat, player, "attack", _ScriptedRNG(draws=[0.0, 99.0]))

    assert result.outcome == "won"
    assert result.enemy_hp == 0
    assert player.xp == 10
    assert player.gold == 10
    assert result.log_lines[-2:] == ["Shore Slime defeated!", "Victory! You gained 10 EXP and 10 Gold."]
    assert sum(isinstance(event, RewardsGrantedEvent) for event in result.events) == 1

    with pytest.raises(CombatContractError):
        service.resolve_round(combat, player, "attack", _ScriptedRNG(draws=[0.0, 99.0]))
    assert player.xp == 10
    assert player.gold == 10


def test_loss_ends_round_without_rewards() -> None:
    service = CombatService()
    player = _make_player(hp=1, speed=4)
    combat, _ = service.begin(player, _make_template(speed=9), _ScriptedRNG())

    result = service.resolve_round(combat, player, "attack", _ScriptedRNG(draws=[0.0, 99.0]))

    assert result.outcome == "lost"
    assert result.player_hp == 0
    assert result.log_lines[-1] == "Player was defeated..."
    assert player.xp == 0
    assert player.gold == 0


def test_run_flees_without_damage_or_rewards() -> None:
    service = CombatService()
    player = _make_player()
    combat, _ = service.begin(player, _make_template(), _ScriptedRNG())

    result = service.resolve_round(combat, player, "run", _ScriptedRNG())

    assert result.outcome == "fled"
    assert result.log_lines == ["You ran away!"]
    assert player.stats.hp == 25
    assert player.xp == 0
    assert combat.is_over


def test_force_outcome_win_applies_rewards() -> None:
    service = CombatService()
    player = _make_player()
    combat, _ = service.begin(player, _make_template(), _ScriptedRNG())

    result = service.force_outcome(combat, player, "won")

    assert result.outcome == "won"
    assert player.xp == 10
    with pytest.raises(CombatContractError):
        service.force_outcome(combat, player, "won")
    assert player.xp == 10


def test_unknown_action_raises() -> None:
    service = CombatService()
    player = _make_player()
    combat, _ = service.begin(player, _make_template(), _ScriptedRNG())
    with pytest.raises(ValueError):
        service.resolve_round(combat, player, "dance", _ScriptedRNG())


def test_rewards_come_from_spawned_instance() -> None:
    service = CombatService()
    player = _make_player()
    combat, _ = service.begin(player, _make_template(), _ScriptedRNG())
    assert (combat.enemy_instance.xp_reward, combat.enemy_instance.gold_reward) == (10, 10)
    combat.enemy_instance.gold_reward = 7

    result = service.force_outcome(combat, player, "won")

    assert (result.rewards.xp, result.rewards.gold) == (10, 7)
    assert (player.xp, player.gold) == (10, 7)
