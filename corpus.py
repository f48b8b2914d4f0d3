"""Sources of candidate rows (articles and products), fetched fresh per request."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import requests

from config_loader import AppConfig

Row = dict[str, Any]

ARTICLES_FILE = "articles.json"
PRODUCTS_FILE = "products.json"
PUBLISHED_STATUS = "published"


class CorpusError(RuntimeError):
    """Candidate rows could not be fetched."""


class CorpusConfigError(CorpusError):
    """The corpus backend is not configured."""


class CorpusSource(Protocol):
    def fetch_articles(self, limit: int) -> list[Row]:
        ...

    def fetch_products(self, limit: int) -> list[Row]:
        ...


def published_only(rows: list[Row]) -> list[Row]:
    """Drop rows that carry a status other than ``published``."""
    return [row for row in rows if row.get("status", PUBLISHED_STATUS) == PUBLISHED_STATUS]


class StaticCorpus:
    """In-memory rows, newest first."""

    def __init__(self, articles: list[Row] | None = None, products: list[Row] | None = None) -> None:
        self._articles = list(articles or [])
        self._products = list(products or [])

    def fetch_articles(self, limit: int) -> list[Row]:
        return published_only(self._articles)[:limit]

    def fetch_products(self, limit: int) -> list[Row]:
        return self._products[:limit]


class JsonFileCorpus:
    """Reads ``articles.json`` and ``products.json`` (lists of objects, newest first)."""

    def __init__(self, data_dir: Path, logger: logging.Logger) -> None:
        self._data_dir = data_dir
        self._logger = logger

    def _read_rows(self, name: str) -> list[Row]:
        file_path = self._data_dir / name
        if not file_path.exists():
            self._logger.warning("Corpus file %s does not exist, treating as empty", file_path)
            return []

        try:
            with file_path.open("r", encoding="utf-8") as file:
                raw = json.load(file)
        except (OSError, json.JSONDecodeError) as exc:
            raise CorpusError(f"Failed to read {file_path}: {exc}") from exc

        if not isinstance(raw, list):
            raise CorpusError(f"{file_path} must contain a JSON list of objects")
        rows = [row for row in raw if isinstance(row, dict)]
        self._logger.debug("Loaded %d rows from %s", len(rows), file_path)
        return rows

    def fetch_articles(self, limit: int) -> list[Row]:
        return published_only(self._read_rows(ARTICLES_FILE))[:limit]

    def fetch_products(self, limit: int) -> list[Row]:
        return self._read_rows(PRODUCTS_FILE)[:limit]


class SupabaseCorpus:
    """Fetches rows through the Supabase REST (PostgREST) interface."""

    def __init__(
        self,
        base_url: str | None,
        api_key: str | None,
        logger: logging.Logger,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._api_key = api_key or ""
        self._logger = logger
        self._session = session or requests.Session()
        self._timeout = timeout

    def _fetch(self, table: str, limit: int, filters: dict[str, str] | None = None) -> list[Row]:
        if not self._base_url or not self._api_key:
            raise CorpusConfigError(
                "Missing Supabase configuration: set supabase_url and supabase_key "
                "(or SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY / SUPABASE_ANON_KEY)."
            )

        params = {"select": "*", "order": "id.desc", "limit": str(limit)}
        params.update(filters or {})
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        url = f"{self._base_url}/rest/v1/{table}"

        try:
            response = self._session.get(url, params=params, headers=headers, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise CorpusError(f"Failed to fetch {table}: {exc}") from exc
        except ValueError as exc:
            raise CorpusError(f"Invalid JSON returned for {table}: {exc}") from exc

        if not isinstance(payload, list):
            raise CorpusError(f"Unexpected payload for {table}: expected a list")
        self._logger.debug("Fetched %d %s rows", len(payload), table)
        return [row for row in payload if isinstance(row, dict)]

    def fetch_articles(self, limit: int) -> list[Row]:
        return self._fetch("articles", limit, {"status": f"eq.{PUBLISHED_STATUS}"})

    def fetch_products(self, limit: int) -> list[Row]:
        return self._fetch("products", limit)


def build_corpus(config: AppConfig, logger: logging.Logger) -> CorpusSource:
    """Create the corpus source selected by ``config.backend``."""
    if config.backend == "supabase":
        return SupabaseCorpus(config.supabase_url, config.supabase_key, logger)
    return JsonFileCorpus(config.data_dir, logger)
