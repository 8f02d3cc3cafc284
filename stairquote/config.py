from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./stairquote.db"
    COMPANY_NAME: str = "Stair & Millwork Shop"
    LOG_LEVEL: str = "INFO"

    # Stair geometry defaults (inches)
    LANDING_TREAD_WIDTH: float = 3.5  # fixed nosing width of the landing tread
    DEFAULT_NOSE_SIZE: float = 1.25

    # Seed default materials / price rules / special parts on first run
    SEED_DEFAULT_CATALOG: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
