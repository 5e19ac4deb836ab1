"""Constants for the retry kit."""

# Attempts before a flaky call is given up on
DEFAULT_MAX_ATTEMPTS = 10

# The simulated external service passes half the time
DEFAULT_SUCCESS_RATE = 0.5

DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_REPORTS_DIR = "execution/reports"

# Quotes served by the simulated price API
COIN_PRICES = {
    "Bitcoin": "$8500",
    "Litecoin": "$50",
    "Ethereum": "$100",
}

UNKNOWN_COIN = "Unknown Coin"
