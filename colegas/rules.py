"""Scoring rule table: per-role statistic weights."""

import logging

from .constants import DEFAULT_SCORING_RULES, STAT_NAMES
from .models import PlayerRole
from .schemas import LeagueDatabase, ScoringRule
from .store import LeagueStore, next_id

logger = logging.getLogger('colegas.rules')


def rules_for_role(db: LeagueDatabase, role: PlayerRole) -> list[ScoringRule]:
    """All rules that apply to a role, in insertion order (may be empty)."""
    role = PlayerRole(role)
    return [rule for rule in db.scoring_rules if rule.role == role]


def add_rule(db: LeagueDatabase, stat_name: str, points_per_unit: float, role: PlayerRole) -> ScoringRule:
    """
    Append a rule to the table.

    Duplicate (stat, role) pairs are kept and their effects add up. A name
    the calculator doesn't recognize is stored but scores nothing.
    """
    if stat_name not in STAT_NAMES:
        logger.warning(f'Scoring rule for unrecognized stat {stat_name!r} will score 0')

    rule = ScoringRule(
        id=next_id(db, 'scoring_rule'),
        stat_name=stat_name,
        points_per_unit=float(points_per_unit),
        role=PlayerRole(role),
    )
    db.scoring_rules.append(rule)
    return rule


def seed_default_rules(db: LeagueDatabase) -> int:
    """
    Install the default rule set when the table is empty.

    Returns:
        Number of rules created (0 if rules already existed)
    """
    if db.scoring_rules:
        return 0

    for stat_name, points, role in DEFAULT_SCORING_RULES:
        add_rule(db, stat_name, points, PlayerRole(role))

    logger.info(f'Seeded {len(DEFAULT_SCORING_RULES)} default scoring rules')
    return len(DEFAULT_SCORING_RULES)


class ScoringRuleTable:
    """Read-mostly view of the scoring rules held in a store."""

    def __init__(self, store: LeagueStore):
        self.store = store

    def rules_for_role(self, role: PlayerRole) -> list[ScoringRule]:
        return rules_for_role(self.store.snapshot(), role)

    def all_rules(self) -> list[ScoringRule]:
        return list(self.store.snapshot().scoring_rules)

    def add_rule(self, stat_name: str, points_per_unit: float, role: PlayerRole) -> ScoringRule:
        with self.store.transaction() as db:
            return add_rule(db, stat_name, points_per_unit, role)

    def seed_defaults(self) -> int:
        with self.store.transaction() as db:
            return seed_default_rules(db)
