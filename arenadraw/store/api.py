import logging
import os
from typing import Any, Mapping, Optional

import requests
from dotenv import load_dotenv

from ..exceptions import ConnectivityError
from ..models.team import TeamRecord
from .utils import is_success, open_session, parse_team_record

logger = logging.getLogger(__name__)


class RecordStoreClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        load_dotenv()
        url = base_url or os.getenv("RECORD_STORE_URL")
        if not url:
            raise ValueError("Environment variable 'RECORD_STORE_URL' is not set")

        self.base_url = url
        self.timeout = (
            timeout
            if timeout is not None
            else float(os.getenv("RECORD_STORE_TIMEOUT", "30"))
        )
        self.session = session or open_session()

    # -------- core request --------
    def _request(
        self,
        method: str,
        *,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> dict:
        action = (params or {}).get("action")
        try:
            r = self.session.request(
                method=method.upper(),
                url=self.base_url,
                headers={"Accept": "application/json"},
                params=params,
                json=json,
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            # Exception text may embed the request URL, which carries the admin key.
            status = getattr(e.response, "status_code", None)
            reason = type(e).__name__ + (f" (HTTP {status})" if status else "")
            logger.error(f"Record store request '{action}' failed: {reason}")
            raise ConnectivityError(f"Could not reach the record store: {reason}") from e

        try:
            payload = r.json()
        except ValueError as e:
            raise ConnectivityError(
                "Invalid response from server. Check API configuration."
            ) from e
        if not isinstance(payload, dict):
            raise ConnectivityError(f"Unexpected record store response: {payload!r}")
        logger.debug(f"Record store '{action}' answered status={payload.get('status')}")
        return payload

    # -------- API callers --------
    def verify(self, team_id: str) -> Optional[TeamRecord]:
        """Look up the recorded rounds for ``team_id``.

        Returns ``None`` when the store has no such team.
        """
        payload = self._request("GET", params={"action": "check", "team": team_id})
        if not is_success(payload):
            return None
        return parse_team_record(team_id, payload)

    def save(self, team_id: str, round_number: int, result: str) -> Mapping[str, Any]:
        # The store answers with {"status": "success"|"error", "message": ...}.
        return self._request(
            "POST",
            params={"action": "record"},
            json={"team": team_id, "round": round_number, "result": result},
        )

    def list_all(self, admin_key: str) -> Mapping[str, Any]:
        """Fetch every team's record. The store checks ``admin_key`` itself."""
        return self._request("GET", params={"action": "admin", "key": admin_key})
