from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DRIVERS_URL: str = "http://localhost:5420/esr_drivers"
    DRIVERS_API_KEY: str = ""
    DIRECTORY_TIMEOUT: float = 5.0

    DIRECTIONS_URL: str = "http://localhost:5422/esr_directions"
    DIRECTIONS_API_KEY: str = ""
    ROUTING_TIMEOUT: float = 10.0

    MAJOR_ROAD_PATTERN: str = r"A\d+"

    REDIS_URL: Optional[str] = None
    ROUTE_CACHE_TTL: int = 300  # 5 minutes

    API_TITLE: str = "Ride Quote Service"
    API_DESCRIPTION: str = "Prices a journey with the cheapest available driver and surge rules"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
