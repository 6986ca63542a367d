"""
Client for the remote score server.

Every endpoint is a form-encoded POST that answers with JSON:
- verify_credentials -> {"result": int}  (positive = account id, 0/-1/-2/-3 = error codes)
- submit_score       -> any non-empty body counts as an ack
- get_high_scores    -> {"scores": [{"username": ..., "score": ...}, ...]}
- get_instructions   -> {"misc": [{"name": ..., "value": ...}, ...]}

Failures are sorted into the errors.py taxonomy:
requests problems -> TransportError, unreadable JSON -> MalformedResponseError.
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import pydantic
import requests

from .config import Settings, get_settings
from .engine import MAX_TURNS
from .errors import MalformedResponseError, TransportError, ValidationError
from .schemas import HighScoresPayload, SplashPayload, VerifyPayload
from .session import UserSession

logger = logging.getLogger(__name__)

FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "Content-Language": "en-US",
}

INSTRUCTIONS_FIELD = "instructions"


class RemoteClient:
    def __init__(self, settings: Optional[Settings] = None, http: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.http = http or requests.Session()

    def _url(self, path: str) -> str:
        return urljoin(self.settings.remote_base_url, path)

    def _post(self, path: str, data: Optional[Dict[str, Any]] = None) -> str:
        url = self._url(path)
        logger.debug("POST %s", url)
        try:
            response = self.http.post(
                url,
                data=data or {},
                headers=FORM_HEADERS,
                timeout=self.settings.remote_timeout_sec,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

        body = response.content.decode("utf-8", errors="replace")
        if not body.strip():
            raise TransportError(f"POST {url}: result empty")
        return body

    def _parse(self, body: str, model):
        try:
            return model.model_validate(json.loads(body))
        except (ValueError, pydantic.ValidationError) as exc:
            raise MalformedResponseError(f"Could not parse server response: {exc}") from exc

    def is_reachable(self) -> bool:
        """Cheap connectivity probe against the server root."""
        try:
            self.http.head(self.settings.remote_base_url, timeout=self.settings.remote_timeout_sec)
        except requests.RequestException as exc:
            logger.info("Remote server not reachable: %s", exc)
            return False
        return True

    def verify_credentials(self, username: str, password: str) -> int:
        """Returns the raw result code; the caller decides what each code means."""
        if not username or not password:
            raise ValidationError("Username or password were empty.")
        body = self._post(
            self.settings.remote_verify_path,
            {"username": username, "password": password},
        )
        return self._parse(body, VerifyPayload).result

    def submit_score(self, session: UserSession) -> str:
        if not session.username or not session.secret_code or session.auth_token <= 0:
            raise ValidationError("Query parameters missing for score submission.")
        form = {
            "account_id": str(session.auth_token),
            "secret_number": session.secret_code,
            "turns": str(min(session.turns, MAX_TURNS)),
            "time_in_seconds": str(session.elapsed_seconds),
            "score": str(session.score),
        }
        return self._post(self.settings.remote_submit_path, form)

    def get_high_scores(self) -> HighScoresPayload:
        body = self._post(self.settings.remote_scores_path)
        return self._parse(body, HighScoresPayload)

    def get_instructions(self) -> Optional[str]:
        body = self._post(self.settings.remote_splash_path)
        payload = self._parse(body, SplashPayload)
        for entry in payload.misc:
            if entry.name == INSTRUCTIONS_FIELD and entry.value:
                return entry.value
        return None
