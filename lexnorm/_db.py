"""PostgreSQL connection — configured through environment variables (.env supported)."""

from __future__ import annotations

import os
import pathlib

import psycopg2
from dotenv import load_dotenv

from repository.postgres import PostgresRepository

load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env")


def get_connection() -> psycopg2.extensions.connection:
    return psycopg2.connect(
        host     = os.getenv("PGHOST",     "localhost"),
        port     = int(os.getenv("PGPORT", "5432")),
        dbname   = os.getenv("PGDATABASE", "lexnorm"),
        user     = os.getenv("PGUSER",     "lexnorm"),
        password = os.getenv("PGPASSWORD", "lexnorm"),
    )


def get_repository() -> PostgresRepository:
    return PostgresRepository(get_connection())
