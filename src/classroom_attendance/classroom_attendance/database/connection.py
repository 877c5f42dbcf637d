from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "classroom_attendance")),
        )


class DatabaseConnection:
    """DB connection factory bound to one config.

    Note: We create short-lived connections per operation, one per request
    step, so no connection is shared between requests.
    """

    def __init__(self, config: DBConfig):
        self.config = config

    def connect(self, *, with_database: bool = True):
        kwargs = dict(
            host=self.config.host,
            port=int(self.config.port),
            user=self.config.user,
            password=self.config.password,
        )
        if with_database:
            kwargs["database"] = self.config.database
        return mysql.connector.connect(**kwargs)
