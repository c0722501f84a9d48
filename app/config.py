"""
Match and commentary configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class MatchSettings:
    """Match settings from environment variables"""

    # Match format
    MAX_OVERS: int = int(os.getenv("MAX_OVERS", "2"))
    MAX_WICKETS: int = int(os.getenv("MAX_WICKETS", "2"))
    BALLS_PER_OVER: int = int(os.getenv("BALLS_PER_OVER", "6"))

    # Pause before innings break / result screens
    STAGE_TRANSITION_DELAY_SECONDS: float = float(os.getenv("STAGE_TRANSITION_DELAY_SECONDS", "2.0"))

    # Gemini commentary settings
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", os.getenv("API_KEY", ""))
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    COMMENTARY_TIMEOUT_SECONDS: float = float(os.getenv("COMMENTARY_TIMEOUT_SECONDS", "10"))

    # Comma-separated origins allowed by the HTTP API
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = MatchSettings()
