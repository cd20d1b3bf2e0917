"""Shared defaults for the Dune API client."""

BASE_URL = "https://api.dune.com/api/v1"
API_KEY_HEADER = "X-Dune-Api-Key"

# Seconds between status checks while an execution is in flight.
POLL_FREQUENCY_SECONDS = 1

# Default freshness threshold for latest-result lookups (90 days).
THREE_MONTHS_IN_HOURS = 2160

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0

DUNE_CSV_NEXT_URI_HEADER = "x-dune-next-uri"
DUNE_CSV_NEXT_OFFSET_HEADER = "x-dune-next-offset"
