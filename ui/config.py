from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    ENVIRONMENT: Literal["local", "production"] = "local"
    
    SECRET_KEY: str = ""
    POLYGON_API_URL: str = "https://api.polygon.io"
    POLYGON_API_KEY: str = ""
    HTTP_TIMEOUT_READ: float = 5.0
    
    CHART_TARGET_POINTS: int = 110
    CHART_JITTER_SEED: int = 0
    DISPLAY_TIME_ZONE: str = "America/New_York"
    
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "DEBUG"
        
    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )
 
 
settings = Settings()
