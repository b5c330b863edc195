# scanprint/core/config.py
"""Station settings. Endpoints are fixed local addresses."""
from pathlib import Path

# Product lookup service (GET /api/fetch-product?code=...)
LOOKUP_BASE_URL: str = "http://localhost:8386"

# Label print service (POST /print/)
PRINT_URL: str = "http://localhost:5000/print/"

# When False, scans are only looked up and listed; no Status column.
PRINT_ENABLED: bool = True

# Seconds per outbound HTTP request.
HTTP_TIMEOUT: float = 10.0

# Durable storage: one JSON file holding string-keyed slots.
# Relative to the working directory the station is started from.
DATA_DIR: Path = Path("data")
STORAGE_FILE: Path = DATA_DIR / "local_storage.json"
STORAGE_KEY: str = "products"

# Shown when the lookup service omits a field.
PLACEHOLDER: str = "N/A"

# Loguru JSON sink
LOG_DIR: Path = Path("logs")
LOG_FILE: Path = LOG_DIR / "logs.json"

HOST: str = "0.0.0.0"
PORT: int = 3000
