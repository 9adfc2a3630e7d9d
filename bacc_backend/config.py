"""Environment-driven settings, read once when the app is built."""

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv


def load_config() -> Dict[str, Any]:
    """Return Flask config keys populated from the environment (and ``.env``)."""
    load_dotenv()

    data_dir = Path(os.getenv("BACC_DATA_DIR", "data"))
    return {
        "DATA_DIR": data_dir,
        "CALCULATIONS_FILE": data_dir / os.getenv("BACC_CALCULATIONS_FILE", "bacc_calculations.json"),
        "SURVEY_FILE": data_dir / os.getenv("BACC_SURVEY_FILE", "bacc_survey_responses.json"),
        "RESEARCH_DB": Path(os.getenv("BACC_RESEARCH_DB", str(data_dir / "bacc_research.sqlite3"))),
        "RATE_LIMIT": os.getenv("BACC_RATE_LIMIT", "100 per minute"),
        "LOG_LEVEL": os.getenv("BACC_LOG_LEVEL", "INFO").upper(),
        "HOST": os.getenv("HOST", "0.0.0.0"),
        "PORT": int(os.getenv("PORT", "5050")),
    }
