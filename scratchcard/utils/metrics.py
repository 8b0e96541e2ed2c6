from prometheus_client import Counter

VERIFICATIONS = Counter(
    "scratchcard_verifications_total",
    "Code verification submissions",
    ["result"],  # valid | used | invalid
)
CLAIMS_ENTERED = Counter(
    "scratchcard_claims_entered_total",
    "enter-claim attempts by outcome",
    ["outcome"],
)
PRIZES_MARKED_CLAIMED = Counter(
    "scratchcard_prizes_marked_claimed_total",
    "Prizes handed over and marked claimed by an admin",
)
CODES_IMPORTED = Counter(
    "scratchcard_codes_imported_total",
    "Codes inserted by imports",
)
