"""Database configuration."""

import os
from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy.engine import URL


class DatabaseConfig(BaseModel):
    """Relational store configuration from environment variables.

    ``url`` wins when set; otherwise a MySQL URL is assembled from the
    ``MYSQL_*`` parts and connected through mysql-connector.
    """

    url: Optional[str] = None
    host: str = Field(default="localhost")
    port: int = Field(default=3306)
    user: str = Field(default="marketplace")
    password: str = Field(default="marketplace123")
    database: str = Field(default="marketplace")
    pool_size: int = Field(default=5, ge=1)
    echo: bool = False

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        return cls(
            url=os.getenv("DATABASE_URL") or None,
            host=os.getenv("MYSQL_HOST", "localhost"),
            port=int(os.getenv("MYSQL_PORT", "3306")),
            user=os.getenv("MYSQL_USER", "marketplace"),
            password=os.getenv("MYSQL_PASSWORD", "marketplace123"),
            database=os.getenv("MYSQL_DATABASE", "marketplace"),
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            echo=os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes"),
        )

    def sqlalchemy_url(self):
        if self.url:
            return self.url
        return URL.create(
            "mysql+mysqlconnector",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )
