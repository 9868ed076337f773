from typing import Optional
from pydantic_settings import BaseSettings
from urllib.parse import quote_plus

class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "storefront"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full SQLAlchemy URL, wins over the postgres parts (sqlite in tests)
    database_url_override: Optional[str] = None

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    reset_token_expire_minutes: int = 60

    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    currency: str = "usd"

    base_url: str = "http://localhost:8000"

    brevo_api_key: str = ""
    mail_from: str = "shop@example.com"
    store_name: str = "Storefront"

    invoice_dir: str = "data/invoices"
    upload_dir: str = "images"

    items_per_page: int = 2

    @property
    def database_url(self):
        if self.database_url_override:
            return self.database_url_override

        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
