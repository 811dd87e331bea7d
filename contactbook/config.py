from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    APP_NAME: str = "Contact Book"
    SECRET_KEY: str = "CHANGE_ME"
    SESSION_COOKIE_NAME: str = "contactbook_session"
    ENV: str = "production"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./contacts.db"

    # Anti-forgery tokens on form submits (seconds)
    CSRF_TOKEN_MAX_AGE: int = 60 * 60 * 2

settings = Settings()
