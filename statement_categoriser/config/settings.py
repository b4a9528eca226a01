"""Global settings and configuration."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Directories
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"
LOGS_DIR = PROJECT_ROOT / "logs"

# API Keys
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")

# AI categorisation settings (low temperature for repeatable answers)
CATEGORISATION_MODEL = os.getenv("CATEGORISATION_MODEL", "claude-3-5-haiku-20241022")
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.1"))
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "200"))
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))

# Results below this confidence need a human to review them ("homework")
CONFIDENCE_THRESHOLD = float(os.getenv("CONFIDENCE_THRESHOLD", "0.7"))

# Recategorisation batching (owned by the calling layer, not the engine)
RECATEGORISE_BATCH_SIZE = int(os.getenv("RECATEGORISE_BATCH_SIZE", "5"))
RECATEGORISE_BATCH_DELAY = float(os.getenv("RECATEGORISE_BATCH_DELAY", "0.5"))

# Learned merchant mappings
MAPPINGS_FILE = Path(os.getenv("MAPPINGS_FILE", str(DATA_DIR / "category_mappings.yaml")))

# CSV parsing
HEADER_SCAN_LIMIT = 10

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = LOGS_DIR / "categoriser.log"

# Currency settings
DEFAULT_CURRENCY = "GBP"
CURRENCY_SYMBOLS = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€"
}
