from __future__ import annotations

import os
from typing import List


class Settings:
    """Centralized configuration for the nutrition backend."""

    def __init__(self) -> None:
        self.log_level: str = (os.environ.get("NUTRI_LOG_LEVEL") or "INFO").strip().upper()
        # Logs one warning per corrected calorie value.
        self.log_corrections: bool = (os.environ.get("NUTRI_LOG_CORRECTIONS") or "true").strip().lower() in {
            "1",
            "true",
            "yes",
        }
        self.max_raw_response_bytes: int = int(
            os.environ.get("NUTRI_MAX_RAW_RESPONSE_BYTES") or "2000000"
        )

        cors = os.environ.get("NUTRI_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
