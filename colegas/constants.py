"""Constants and mappings for the Colegas fantasy league."""

# Statistic keys recorded for a player in a match, in display order
STAT_NAMES = (
    'goals_scored',
    'clear_misses',
    'assists',
    'goals_conceded_as_keeper',
    'saves_as_keeper',
    'concessions',
    'fouls_committed',
    'fouls_received',
    'penalties_won',
    'penalties_conceded',
    'passes_completed',
    'passes_failed',
    'steals',
    'shots_on_target',
    'shots_off_target',
    'minutes_played',
    'yellow_cards',
    'red_cards',
)

# Default scoring rules seeded into an empty rule table: (stat, points, role)
DEFAULT_SCORING_RULES = [
    ('goals_scored', 5.0, 'FIELD'),
    ('assists', 3.0, 'FIELD'),
    ('clear_misses', -1.0, 'FIELD'),
    ('fouls_committed', -0.5, 'FIELD'),
    ('fouls_received', 0.5, 'FIELD'),
    ('yellow_cards', -1.0, 'FIELD'),
    ('red_cards', -3.0, 'FIELD'),
    ('saves_as_keeper', 0.5, 'GOALKEEPER'),
    ('goals_conceded_as_keeper', -2.0, 'GOALKEEPER'),
    ('penalties_won', 2.0, 'GOALKEEPER'),
    ('penalties_conceded', -3.0, 'GOALKEEPER'),
    ('yellow_cards', -1.0, 'GOALKEEPER'),
    ('red_cards', -3.0, 'GOALKEEPER'),
]

# Join codes are drawn from this alphabet
JOIN_CODE_ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'

# Rosters carry exactly this many goalkeepers
GOALKEEPERS_PER_ROSTER = 1

# Sanity thresholds for a single player's match points (per role)
MAX_REASONABLE_MATCH_POINTS = 60.0
MIN_REASONABLE_MATCH_POINTS = -30.0
