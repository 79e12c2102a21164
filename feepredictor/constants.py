"""Constants used throughout the fee predictor."""

# Sample window
WINDOW_CAPACITY = 144  # ~24 hours if sampled every 10 minutes

# Integer ranges of the on-ledger sample fields
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

# Urgency multipliers
LOW_URGENCY_MULTIPLIER = 0.8
MEDIUM_URGENCY_MULTIPLIER = 1.0
HIGH_URGENCY_MULTIPLIER = 1.5

# Confidence score bounds (0-100)
MAX_CONFIDENCE = 100
MIN_CONFIDENCE_SAMPLES = 2

# Default configuration values
DEFAULT_RPC_URL = "http://127.0.0.1:8899"
DEFAULT_POLL_SECS = 600  # one sample every 10 minutes
DEFAULT_COMPUTE_UNITS = 200_000  # default per-instruction compute unit limit
DEFAULT_MIN_SAMPLES = 0
RECORD_SEED = "fee_data"

# Log rotation defaults
DEFAULT_LOG_MAX_BYTES = 10_485_760  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 30

# Network timeouts
DEFAULT_HTTP_TIMEOUT_SECS = 10
