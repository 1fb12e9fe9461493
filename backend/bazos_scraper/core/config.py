from typing import Optional
from pydantic_settings import BaseSettings

# Bazos serves 20 listings per result page; "crz" advances by this amount
PAGE_SIZE = 20

# Hard ceiling on the pagination offset, whatever the site reports
MAX_OFFSET = 1000

# Requested limits above this are clamped
MAX_RESULTS_LIMIT = 1000

# Used for pagination when the results banner can't be parsed
TOTAL_RESULTS_FALLBACK = 100

DEFAULT_DISTANCE_KM = 25
DEFAULT_RESULTS_LIMIT = 100


class Settings(BaseSettings):
    PROJECT_NAME: str = "Bazos Scraper API"
    USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    REQUEST_TIMEOUT: Optional[float] = None
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "BAZOS_"
        extra = "ignore"

settings = Settings()
