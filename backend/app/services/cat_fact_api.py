"""Client for the upstream cat fact API."""

from __future__ import annotations

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from http.client import HTTPException
from typing import Any, Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

from pydantic import ValidationError

from app.config import get_settings
from app.schema.fact_categories import classify_fact
from app.schemas.cat_fact import CatFactCreate

logger = logging.getLogger(__name__)

DEFAULT_CAT_FACT_API_URL = "https://catfact.ninja/fact"
MAX_FETCH_COUNT = 20


class CatFactApiError(RuntimeError):
    """Raised when an upstream response cannot be turned into a fact."""


class CatFactClient(Protocol):
    """Protocol for fact providers used by the catalog service."""

    def fetch_one(self) -> CatFactCreate | None:
        """Return one new fact, or None when the provider gave nothing usable."""

    def fetch_many(self, count: int) -> list[CatFactCreate]:
        """Return up to ``count`` facts."""

    def probe_availability(self) -> bool:
        """Return whether the provider currently answers with a success status."""


@dataclass(slots=True)
class CatFactApiClient:
    """Minimal catfact.ninja client using stdlib HTTP.

    Every failure mode of a single request (non-2xx status, transport error,
    timeout, malformed or blank payload) is logged and reported as ``None``.
    """

    url: str = DEFAULT_CAT_FACT_API_URL
    timeout_seconds: float = 30
    user_agent: str = "CatFactsApp/1.0"
    max_count: int = MAX_FETCH_COUNT
    dispatch_delay_seconds: float = 0.1
    max_workers: int = 5

    def fetch_one(self) -> CatFactCreate | None:
        try:
            fact = _parse_fact_payload(self._get_json())
        except urllib_error.HTTPError as exc:
            logger.warning("cat_fact_api.bad_status status=%d url=%s", exc.code, self.url)
            return None
        except (OSError, HTTPException) as exc:
            logger.error("cat_fact_api.request_failed url=%s error=%s", self.url, exc)
            return None
        except CatFactApiError as exc:
            logger.warning("cat_fact_api.invalid_payload url=%s reason=%s", self.url, exc)
            return None
        except Exception:
            logger.exception("cat_fact_api.unexpected_failure url=%s", self.url)
            return None

        logger.info("cat_fact_api.fact_fetched length=%d category=%s", fact.length, fact.category)
        return fact

    def fetch_many(self, count: int) -> list[CatFactCreate]:
        if count < 1 or count > self.max_count:
            raise ValueError(f"count must be between 1 and {self.max_count}, got {count}")

        workers = max(1, min(count, self.max_workers))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = []
            for index in range(count):
                if index and self.dispatch_delay_seconds > 0:
                    time.sleep(self.dispatch_delay_seconds)
                futures.append(pool.submit(self.fetch_one))
            results = [future.result() for future in futures]

        facts = [fact for fact in results if fact is not None]
        logger.info("cat_fact_api.batch_fetched fetched=%d requested=%d", len(facts), count)
        return facts

    def probe_availability(self) -> bool:
        try:
            with urllib_request.urlopen(self._build_request(), timeout=self.timeout_seconds) as resp:
                available = 200 <= int(resp.status) < 300
        except urllib_error.HTTPError as exc:
            logger.warning("cat_fact_api.probe_bad_status status=%d url=%s", exc.code, self.url)
            return False
        except Exception:
            logger.exception("cat_fact_api.probe_failed url=%s", self.url)
            return False

        logger.info("cat_fact_api.probe url=%s available=%s", self.url, available)
        return available

    def _build_request(self) -> urllib_request.Request:
        return urllib_request.Request(
            url=self.url,
            method="GET",
            headers={
                "Accept": "application/json",
                "User-Agent": self.user_agent,
            },
        )

    def _get_json(self) -> Any:
        with urllib_request.urlopen(self._build_request(), timeout=self.timeout_seconds) as resp:
            status = int(resp.status)
            if not 200 <= status < 300:
                raise CatFactApiError(f"unexpected status {status}")
            raw = resp.read().decode("utf-8", errors="replace")

        if not raw.strip():
            raise CatFactApiError("response body was empty")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CatFactApiError("response body was not valid JSON") from exc


def get_default_cat_fact_client() -> CatFactApiClient:
    """Return a client configured from application settings."""

    settings = get_settings()
    return CatFactApiClient(
        url=settings.cat_fact_api_url,
        timeout_seconds=settings.cat_fact_timeout_seconds,
        user_agent=settings.cat_fact_user_agent,
        max_count=settings.fetch_max_count,
        dispatch_delay_seconds=settings.fetch_dispatch_delay_seconds,
        max_workers=settings.fetch_max_workers,
    )


def _parse_fact_payload(payload: Any) -> CatFactCreate:
    if not isinstance(payload, dict):
        raise CatFactApiError("payload was not a JSON object")
    raw_text = payload.get("fact")
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise CatFactApiError("fact text was empty")

    text = raw_text.strip()
    raw_length = payload.get("length")
    if isinstance(raw_length, int) and not isinstance(raw_length, bool) and raw_length >= 0:
        length = raw_length
    else:
        length = len(text)

    try:
        return CatFactCreate(
            text=text,
            length=length,
            category=classify_fact(text),
            rating=0,
            is_favorite=False,
            created_at=datetime.now(timezone.utc),
        )
    except ValidationError as exc:
        raise CatFactApiError(f"fact failed validation ({exc.error_count()} errors)") from exc
