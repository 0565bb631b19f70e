from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    PROJECT_NAME: str = "YelpCamp"
    DATABASE_URL: str = Field("sqlite:///./yelpcamp.db", alias="DATABASE_URL")
    SECRET_KEY: str = Field("dev-secret", alias="SESSION_SECRET")
    SESSION_COOKIE_NAME: str = "session"
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 14   # 14 days
    LOG_LEVEL: str = "INFO"

    # registration code that grants isAdmin; empty means nobody gets it
    ADMIN_CODE: str | None = Field(None, alias="ADMIN")

    CLOUDINARY_CLOUD_NAME: str = "jharris"
    CLOUDINARY_API_KEY: str | None = None
    CLOUDINARY_API_SECRET: str | None = None

    MAIL_HOST: str = "smtp.gmail.com"
    MAIL_PORT: int = 587
    MAIL_USERNAME: str | None = Field(None, alias="GMAIL")
    MAIL_PASSWORD: str | None = Field(None, alias="GMAIL_PW")
    MAIL_FROM: str | None = None
    MAIL_USE_TLS: bool = True

    RESET_TOKEN_TTL_SECONDS: int = 3600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def SESSION_SECRET(self) -> str:
        return self.SECRET_KEY

    @property
    def mail_sender(self) -> str | None:
        return self.MAIL_FROM or self.MAIL_USERNAME

_settings: Settings | None = None
def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
