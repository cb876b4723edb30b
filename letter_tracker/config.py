# letter_tracker/config.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from typing import List, Optional

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="allow")

    # MySQL
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_user: str = "letters"
    mysql_password: str = "letters"
    mysql_database: str = "letter_tracking"

    # Full SQLAlchemy URL, overrides the MySQL pieces when set
    database_url: Optional[str] = None

    # Shipment rules
    eta_offset_days: int = 5
    stuck_in_transit_days: int = 20
    # "<column>.<asc|desc>", used when the sort parameter is absent
    default_sort: str = "mailed_at.desc"

    # App Settings
    app_name: str = "Letter Tracking Service"
    app_version: str = "1.0.0"
    cors_origins: List[str] = ["*"]
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("default_sort")
    @classmethod
    def check_default_sort(cls, value: str) -> str:
        column, _, direction = value.partition(".")
        if not column.strip() or direction not in ("asc", "desc"):
            raise ValueError("default_sort must look like '<column>.asc' or '<column>.desc'")
        return value

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+aiomysql://{self.mysql_user}:{self.mysql_password}"
            f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}"
        )

settings = Settings()
