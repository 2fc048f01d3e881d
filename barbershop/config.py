from functools import lru_cache
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    env: str = Field(default="dev", alias="ENV")
    timezone: str = Field(default="America/Regina", alias="TIMEZONE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(default="", alias="DATABASE_URL")
    postgres_db: str = Field(default="barbershop", alias="POSTGRES_DB")
    postgres_user: str = Field(default="barbershop", alias="POSTGRES_USER")
    postgres_password: str = Field(default="barbershop", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    jwt_secret: str = Field(default="secret", alias="JWT_SECRET")
    jwt_expire_min: int = Field(default=720, alias="JWT_EXPIRE_MIN")

    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    notification_provider: str = Field(default="mailjet", alias="NOTIFICATION_PROVIDER")
    mailjet_api_key: str = Field(default="", alias="MAILJET_API_KEY")
    mailjet_secret_key: str = Field(default="", alias="MAILJET_SECRET_KEY")
    mailjet_from_email: str = Field(default="", alias="MAILJET_FROM_EMAIL")
    mailjet_from_name: str = Field(default="Chaxx Barbershop", alias="MAILJET_FROM_NAME")
    admin_email: str = Field(default="", alias="ADMIN_EMAIL")

    default_admin_email: str = Field(default="admin@chaxxbarbers.com", alias="DEFAULT_ADMIN_EMAIL")
    default_admin_password: str = Field(default="admin123", alias="DEFAULT_ADMIN_PASSWORD")

    class Config:
        populate_by_name = True

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def mailjet_configured(self) -> bool:
        return bool(self.mailjet_api_key and self.mailjet_secret_key)

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=False)
    return Settings(**os.environ)
