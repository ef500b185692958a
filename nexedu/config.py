from pydantic_settings import BaseSettings

DEV_SECRET_KEY = "nexedu-secret-key-change-in-production"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./nexedu.db"
    REDIS_URL: str = "redis://localhost:6379/0"  # vazio desliga o cache
    SECRET_KEY: str = DEV_SECRET_KEY  # apenas desenvolvimento
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    BCRYPT_ROUNDS: int = 10
    LOG_LEVEL: str = "INFO"
    CACHE_TTL: int = 300  # 5 minutes
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE: str = "memory://"
    RATE_LIMIT_PER_MINUTE: int = 60
    LOGIN_RATE_LIMIT_PER_MINUTE: int = 10
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3001"]
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()


def uses_dev_secret() -> bool:
    return settings.SECRET_KEY == DEV_SECRET_KEY
