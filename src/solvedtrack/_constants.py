"""Internal constants shared across the library."""

BASE_URL = "https://leetcode-api-faisalshohag.anga.codes"
USER_AGENT = "solvedtrack/0.1 (+aiohttp)"
METRIC_FIELD = "totalSolved"
STORE_PATH = "ProgressViewer/public/readings.json"

DEFAULT_USERNAMES: tuple[str, ...] = (
    "Anga205",
    "munish42",
    "shakirth-anisha",
    "prayasha_nanda",
    "sashshaikh12",
    "siri_n_shetty",
)

# ------------------------------------------------------------------
# Timing (seconds)
# ------------------------------------------------------------------

CONNECT_TIMEOUT = 15.0
READ_TIMEOUT = 20.0
RETRY_BACKOFF = 30.0
INTER_USER_DELAY = 5.0

# ------------------------------------------------------------------
# Diagnostic snippet lengths
# ------------------------------------------------------------------

ERROR_BODY_LIMIT = 500
RESPONSE_SNIPPET_LIMIT = 200
NO_BODY_PLACEHOLDER = "<no body>"

RECORD_STYLES: frozenset[str] = frozenset({"object", "pair"})
