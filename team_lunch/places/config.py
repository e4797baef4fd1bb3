from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class PlacesConfig:
    api_key: str = ""
    base_url: str = "https://maps.googleapis.com/maps/api/place"
    timeout: float = 10.0
    page_delay_seconds: float = 2.0
    max_pages: int = 3

    @classmethod
    def from_env(cls) -> "PlacesConfig":
        return cls(
            api_key=os.getenv("GOOGLE_PLACES_API_KEY", "").strip(),
            base_url=os.getenv("GOOGLE_PLACES_BASE_URL", cls.base_url),
            timeout=float(os.getenv("GOOGLE_PLACES_TIMEOUT", str(cls.timeout))),
        )
