# Option counts accepted for a single multiple-choice item
MIN_OPTIONS = 2
MAX_OPTIONS = 6

# Labels assigned to options in declared order (correct answer first)
OPTION_LABELS = "ABCDEF"

DEFAULT_TOTAL_SAMPLES = 1200

# Exact Shapley enumeration is O(n!); 6! = 720 orderings
MAX_EXACT_PLAYERS = 6
