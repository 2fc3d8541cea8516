"""
Constants and configuration values for doctree-copier
Centralized location for magic numbers and default values
"""

# ============================================================================
# Store Connection Settings
# ============================================================================

# Default timeout for a single store call, in seconds
DEFAULT_STORE_TIMEOUT = 60.0

# Shorter timeout for quick checks (e.g., listing hosts status)
QUICK_CHECK_TIMEOUT = 5.0

# MongoDB server selection timeout in milliseconds
DEFAULT_MONGO_TIMEOUT = 5000

# Descriptor prefixes
FIRESTORE_SCHEME = 'firestore://'
MONGO_SCHEMES = ('mongodb://', 'mongodb+srv://')

# ============================================================================
# Export Settings
# ============================================================================

# Sequential walk unless told otherwise
DEFAULT_EXPORT_WORKERS = 1

# Upper bound for --workers
MAX_EXPORT_WORKERS = 32

# Attempts per read when the store reports a transient failure
DEFAULT_MAX_RETRIES = 3

# Base delay in seconds, doubled after each failed attempt
DEFAULT_RETRY_DELAY = 0.5

# ============================================================================
# Import Settings
# ============================================================================

# Firestore rejects commits with more than 500 writes
DEFAULT_BATCH_SIZE = 500

# 0 means one atomic batch for the whole snapshot
SINGLE_BATCH = 0

# Chunk failure policies
ON_ERROR_ABORT = 'abort'
ON_ERROR_CONTINUE = 'continue'

# ============================================================================
# Verification Settings
# ============================================================================

# Default sample size for verification
DEFAULT_VERIFICATION_SAMPLE_SIZE = 100

# Snapshots smaller than this are verified document by document
FULL_VERIFY_THRESHOLD = 1000

# ============================================================================
# Formatting Thresholds
# ============================================================================

# Threshold for using 'K' suffix (thousands)
FORMAT_THOUSANDS_THRESHOLD = 1_000

# Threshold for using 'M' suffix (millions)
FORMAT_MILLIONS_THRESHOLD = 1_000_000
