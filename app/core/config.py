from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://fitjourney_user:fitjourney_password@db:5432/fitjourney_db"
    SECRET_KEY: str = "SECRET_KEY_FOR_FITJOURNEY"
    # При продакшн/обычной разработке лучше не пересоздавать БД на каждом старте
    RESET_DATABASE: bool = False
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

settings = Settings()
