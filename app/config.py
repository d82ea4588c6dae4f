# app/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    project_name: str = "Music Catalog API"

    # Database (本番ではPostgreSQLのURLに変更します)
    database_url: str = "sqlite:///./music_catalog.db"
    sql_echo: bool = False

    # JWT (本番では必ず環境変数 SECRET_KEY で上書きすること)
    secret_key: str = "YOUR_SUPER_SECRET_KEY_CHANGE_THIS"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # 一覧APIの1ページあたりの件数
    page_size: int = 10

    log_level: str = "INFO"


settings = Settings()
