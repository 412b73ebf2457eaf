"""Combat service handling deterministic one-on-one encounters."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from isles.core.rng import RNG
from isles.domain.combat_models import (
    CombatActionType,
    CombatPhase,
    CombatState,
    Combatant,
    Rewards,
    Side,
)
from isles.domain.defs import EnemyDef
from isles.domain.entities import Player
from isles.services.errors import CombatContractError
from isles.services.factories import create_enemy_instance

logger = logging.getLogger(__name__)

CRITICAL_MULTIPLIER = 3
MINIMUM_DAMAGE = 1


@dataclass(slots=True)
class CombatEvent:
    """Base combat event."""


@dataclass(slots=True)
class AttackResolvedEvent(CombatEvent):
    attacker_name: str
    target_name: str
    hit: bool
    critical: bool
    damage: int
    target_hp: int


@dataclass(slots=True)
class CombatantDefeatedEvent(CombatEvent):
    combatant_name: str
    side: Side


@dataclass(slots=True)
class RewardsGrantedEvent(CombatEvent):
    xp: int
    gold: int
    total_xp: int
    total_gold: int


@dataclass(slots=True)
class CombatFledEvent(CombatEvent):
    pass


@dataclass(slots=True)
class RoundResult:
    """Everything a caller needs after one call to ``resolve_round``."""

    outcome: CombatPhase
    log_lines: List[str]
    player_hp: int
    enemy_hp: int
    events: List[CombatEvent] = field(default_factory=list)
    rewards: Rewards | None = None


# -----------------------
# Formulas
# -----------------------
def hit_chance(defender_luck: int) -> int:
    """Percent chance that an attack connects against a defender."""
    return max(0, 100 - defender_luck)


def is_hit(draw: float, defender_luck: int) -> bool:
    return draw < hit_chance(defender_luck)


def is_critical(draw: float, attacker_speed: int) -> bool:
    return draw < attacker_speed / 2


def compute_damage(attack: int, defense: int, critical: bool) -> int:
    multiplier = CRITICAL_MULTIPLIER if critical else 1
    return max(MINIMUM_DAMAGE, attack * multiplier - defense)


def turn_order(player_speed: int, enemy_speed: int) -> Tuple[Side, Side]:
    """Faster side acts first; the player wins ties."""
    if player_speed >= enemy_speed:
        return ("player", "enemy")
    return ("enemy", "player")


class CombatService:
    """Resolves encounters round by round without any I/O or timing."""

    # -----------------------
    # Lifecycle
    # -----------------------
    def begin(
        self,
        player: Player,
        template: EnemyDef,
        rng: RNG,
        *,
        active: CombatState | None = None,
    ) -> tuple[CombatState, List[str]]:
        """Instantiate a fresh enemy and open a new encounter."""
        if active is not None and not active.is_over:
            raise CombatContractError("Cannot begin combat while another encounter is in progress.")

        enemy = create_enemy_instance(template, rng)
        combat = CombatState(
            player=Combatant(display_name=player.name, side="player", stats=player.stats),
            enemy=Combatant(display_name=enemy.name, side="enemy", stats=enemy.stats),
            enemy_instance=enemy,
            template=template,
        )
        logger.debug("Combat started against %s (%s)", enemy.name, enemy.id)
        return combat, [f"A {enemy.name} approaches!"]

    def resolve_round(
        self,
        combat: CombatState,
        player: Player,
        action: CombatActionType,
        rng: RNG,
    ) -> RoundResult:
        """Resolve one round for the chosen action."""
        if combat.phase != "in_progress":
            raise CombatContractError(f"Cannot resolve a round when combat is '{combat.phase}'.")
        if action == "run":
            return self._flee(combat)
        if action == "attack":
            return self._exchange_attacks(combat, player, rng)
        raise ValueError(f"Unknown combat action: {action}")

    # -----------------------
    # Actions
    # -----------------------
    def _flee(self, combat: CombatState) -> RoundResult:
        combat.phase = "fled"
        logger.debug("Player fled from %s", combat.enemy.display_name)
        return RoundResult(
            outcome="fled",
            log_lines=["You ran away!"],
            player_hp=combat.player.stats.hp,
            enemy_hp=combat.enemy.stats.hp,
            events=[CombatFledEvent()],
        )

    def _exchange_attacks(self, combat: CombatState, player: Player, rng: RNG) -> RoundResult:
        combat.turn += 1
        lines = [f"-> Turn {combat.turn}"]
        events: List[CombatEvent] = []
        rewards: Rewards | None = None

        order = turn_order(combat.player.stats.speed, combat.enemy.stats.speed)
        for side in order:
            if not combat.player.is_alive or not combat.enemy.is_alive:
                break
            attacker, defender = (combat.player, combat.enemy) if side == "player" else (combat.enemy, combat.player)
            event = self._attack(attacker, defender, rng)
            events.append(event)
            lines.append(_describe_attack(event))

            if not combat.enemy.is_alive:
                combat.phase = "won"
                events.append(CombatantDefeatedEvent(combatant_name=combat.enemy.display_name, side="enemy"))
                lines.append(f"{combat.enemy.display_name} defeated!")
                rewards = self._apply_rewards(combat, player)
                events.append(
                    RewardsGrantedEvent(
                        xp=rewards.xp,
                        gold=rewards.gold,
                        total_xp=player.xp,
                        total_gold=player.gold,
                    )
                )
                lines.append(f"Victory! You gained {rewards.xp} EXP and {rewards.gold} Gold.")
                break
            if not combat.player.is_alive:
                combat.phase = "lost"
                events.append(CombatantDefeatedEvent(combatant_name=combat.player.display_name, side="player"))
                lines.append(f"{combat.player.display_name} was defeated...")
                break

        logger.debug(
            "Round %d resolved: phase=%s player_hp=%d enemy_hp=%d",
            combat.turn,
            combat.phase,
            combat.player.stats.hp,
            combat.enemy.stats.hp,
        )
        return RoundResult(
            outcome=combat.phase,
            log_lines=lines,
            player_hp=combat.player.stats.hp,
            enemy_hp=combat.enemy.stats.hp,
            events=events,
            rewards=rewards,
        )

    def force_outcome(self, combat: CombatState, player: Player, outcome: CombatPhase) -> RoundResult:
        """End the encounter immediately; used by debug tooling."""
        if combat.phase != "in_progress":
            raise CombatContractError(f"Cannot force an outcome when combat is '{combat.phase}'.")
        if outcome == "fled":
            return self._flee(combat)
        if outcome != "won":
            raise ValueError(f"Unsupported forced outcome: {outcome}")
        combat.phase = "won"
        rewards = self._apply_rewards(combat, player)
        return RoundResult(
            outcome="won",
            log_lines=[f"Victory! You gained {rewards.xp} EXP and {rewards.gold} Gold."],
            player_hp=combat.player.stats.hp,
            enemy_hp=combat.enemy.stats.hp,
            events=[
                RewardsGrantedEvent(xp=rewards.xp, gold=rewards.gold, total_xp=player.xp, total_gold=player.gold)
            ],
            rewards=rewards,
        )

    # -----------------------
    # Helpers
    # -----------------------
    def _attack(self, attacker: Combatant, defender: Combatant, rng: RNG) -> AttackResolvedEvent:
        if not is_hit(rng.percent(), defender.stats.luck):
            return AttackResolvedEvent(
                attacker_name=attacker.display_name,
                target_name=defender.display_name,
                hit=False,
                critical=False,
                damage=0,
                target_hp=defender.stats.hp,
            )
        critical = is_critical(rng.percent(), attacker.stats.speed)
        damage = compute_damage(attacker.stats.attack, defender.stats.defense, critical)
        defender.stats.hp = max(0, defender.stats.hp - damage)
        return AttackResolvedEvent(
            attacker_name=attacker.display_name,
            target_name=defender.display_name,
            hit=True,
            critical=critical,
            damage=damage,
            target_hp=defender.stats.hp,
        )

    def _apply_rewards(self, combat: CombatState, player: Player) -> Rewards:
        enemy = combat.enemy_instance
        rewards = Rewards(xp=enemy.xp_reward, gold=enemy.gold_reward)
        if combat.rewards_applied:
            return rewards
        player.xp += rewards.xp
        player.gold += rewards.gold
        combat.rewards_applied = True
        logger.info("Rewards granted: +%d xp, +%d gold", rewards.xp, rewards.gold)
        return rewards


def _describe_attack(event: AttackResolvedEvent) -> str:
    name = event.attacker_name
    if not event.hit:
        return f"{name} attacks! {name} missed! {name} deals 0 hp damage."
    crit_text = "CRITICAL DAMAGE! " if event.critical else ""
    return f"{name} attacks! {crit_text}{name} deals {event.damage} hp damage."
