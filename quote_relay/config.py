from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RECIPIENT = "default@example.com"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", case_sensitive=True)
    APP_TITLE: str = "Insurance Quote Form Relay"

    MAIL_TRANSPORT: Literal["smtp", "ses"] = "smtp"
    MAIL_USERNAME: Optional[str] = None     # account the mail is sent from
    MAIL_PASSWORD: Optional[str] = None     # smtp only
    EMAIL_TO: str = DEFAULT_RECIPIENT

    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465                    # 465 = implicit TLS, anything else STARTTLS
    SMTP_TIMEOUT: float = 30.0
    SES_REGION: str = "us-east-1"

    DEBUG: bool = False
    NODE_ENV: Optional[str] = None          # "development" also turns on DEBUG
    LOG_LEVEL: str = "INFO"

    @property
    def debug_enabled(self) -> bool:
        return self.DEBUG or (self.NODE_ENV or "").strip().lower() == "development"

    @property
    def recipient(self) -> str:
        return (self.EMAIL_TO or "").strip() or DEFAULT_RECIPIENT

    def missing_mail_settings(self) -> List[str]:
        """Names of the mail settings the selected transport needs but are unset."""
        required = ["MAIL_USERNAME"]
        if self.MAIL_TRANSPORT == "smtp":
            required.append("MAIL_PASSWORD")
        return [name for name in required if not (getattr(self, name) or "").strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore
