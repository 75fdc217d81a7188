from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    mongo_url: str = "mongodb://127.0.0.1:27017"
    mongo_db: str = "moviesDB"
    mongo_timeout_ms: int = 5000
    host: str = "localhost"
    port: int = 3000
    log_file: str = "log.txt"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
