"""Unified search and temporal grouping constants.

These settings control the tiered substring search used by the search API
and the way results are bucketed into time sections.
"""

# =============================================================================
# Result Limits
# =============================================================================
# Default cap on rows fetched for a single search or browse operation.

DEFAULT_MAX_RESULTS = 200

# =============================================================================
# Loose Matching
# =============================================================================
# Loose matching interleaves a wildcard between every query character. Short
# queries would match almost everything, so the tier only runs from this
# length on.

LOOSE_MATCH_MIN_LENGTH = 3

# =============================================================================
# Ranking
# =============================================================================
# Substring search has no proportional relevance: every hit gets the same
# rank. Browse results are unranked. Every result currently shares one
# intra-group rank.

SEARCH_RANK_SUBSTRING = 0.5
SEARCH_RANK_BROWSE = 0.0
DEFAULT_GROUP_RANK = 1

# =============================================================================
# Highlighting
# =============================================================================

HIGHLIGHT_OPEN = "<mark>"
HIGHLIGHT_CLOSE = "</mark>"

# =============================================================================
# Temporal Boundaries
# =============================================================================
# Days before "now" (at local start of day) where each bucket begins.

YESTERDAY_DAYS = 1
LAST_WEEK_DAYS = 7
LAST_MONTH_DAYS = 30
