from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    TRAVEL_DATA_LOCAL_URL: str = "http://localhost:3000/travel-data.json"
    TRAVEL_DATA_S3_URL: str = "https://my-travel-data-bucket.s3.us-east-1.amazonaws.com/travel-data.json"
    TRAVEL_DATA_API_URL: str = "http://localhost:3000/api/travel-data"
    TRAVEL_DATA_SOURCE: str = "api"

    FETCH_MAX_ATTEMPTS: int = 3
    FETCH_BASE_DELAY_SECONDS: float = 1.0  # 1s, 2s, 4s...
    FETCH_TIMEOUT_SECONDS: float = 10.0

    TRAVEL_TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
