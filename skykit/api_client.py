"""API client for the external evaluation platform."""

import logging
from typing import Dict, List, Optional

import requests

from .models.kit import KitLoadDecision, KitPurchaseOrder

logger = logging.getLogger(__name__)


class PlatformError(Exception):
    """Raised when the platform answers with a client error (4xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class ExternalAPIClient:
    """HTTP client for the round-based evaluation platform."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        api_key_header: str = "API-KEY",
        session_id_header: str = "SESSION-ID",
        timeout: int = 30,
        endpoints: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL of the evaluation platform
            api_key: API key sent with every request
            api_key_header: Header name for the API key
            session_id_header: Header name for the session id
            timeout: Request timeout in seconds
            endpoints: Overrides for the "start", "play" and "end" paths
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_key_header = api_key_header
        self.session_id_header = session_id_header
        self.timeout = timeout
        self.endpoints = {
            "start": "/api/v1/session/start",
            "play": "/api/v1/play/round",
            "end": "/api/v1/session/end",
        }
        self.endpoints.update(endpoints or {})
        self.session_id: Optional[str] = None

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _post(
        self,
        endpoint: str,
        json_data: Optional[Dict] = None,
        session_id: Optional[str] = None,
        return_text: bool = False,
    ):
        """
        POST to the platform with error handling.

        Raises:
            PlatformError: For 4xx responses
            requests.RequestException: For transport errors and 5xx responses
        """
        url = f"{self.base_url}{endpoint}"
        headers = {self.api_key_header: self.api_key}
        if session_id:
            headers[self.session_id_header] = session_id

        try:
            response = self.session.post(url, json=json_data, headers=headers, timeout=self.timeout)
        except requests.Timeout:
            logger.error(f"Request timeout for {endpoint}")
            raise
        except requests.RequestException as e:
            logger.error(f"Request error for {endpoint}: {e}")
            raise

        if 400 <= response.status_code < 500:
            try:
                details = response.json() if response.content else {}
            except ValueError:
                details = {"body": response.text}
            if not isinstance(details, dict):
                details = {"body": details}
            message = details.get("detail") or details.get("message") or f"HTTP {response.status_code}"

            if response.status_code == 401:
                logger.error(f"401 Unauthorized for {endpoint}. API key: {self.api_key[:8]}...")
            else:
                logger.warning(f"{response.status_code} for {endpoint}: {message}")
            raise PlatformError(message, status_code=response.status_code, details=details)

        response.raise_for_status()

        if return_text:
            return response.text.strip().strip('"')
        return response.json() if response.content else {}

    def start_session(self, stop_existing: bool = True) -> str:
        """
        Start a new session with the evaluation platform.

        Args:
            stop_existing: On 409 (a session is already active), end it and try once more

        Returns:
            Session ID as string
        """
        logger.info("Starting session with evaluation platform")
        try:
            session_id = self._post(self.endpoints["start"], return_text=True)
        except PlatformError as e:
            if e.status_code != 409 or not stop_existing:
                raise
            logger.info("Active session exists, stopping it first...")
            self.stop_existing_session()
            session_id = self._post(self.endpoints["start"], return_text=True)

        self.session_id = session_id
        logger.info(f"Session started: {session_id}")
        return session_id

    def play_round(
        self,
        day: int,
        hour: int,
        loads: List[KitLoadDecision],
        purchase: Optional[KitPurchaseOrder] = None,
        session_id: Optional[str] = None,
    ) -> Dict:
        """
        Play one round of the simulation.

        Args:
            day: Current day
            hour: Current hour
            loads: Flight load decisions
            purchase: Purchase order; the field is omitted from the request when None
            session_id: Session to play in (defaults to the one started by this client)

        Returns:
            HourResponseDto (day, hour, totalCost, flightUpdates, penalties)
        """
        session_id = session_id or self.session_id
        if not session_id:
            raise PlatformError("Session not started. Call start_session() first.")

        payload = {
            "day": day,
            "hour": hour,
            "flightLoads": [load.to_api() for load in loads],
        }
        if purchase is not None:
            payload["kitPurchasingOrders"] = purchase.to_api()

        logger.debug(f"Playing round {day}:{hour} with {len(loads)} loads")
        response = self._post(self.endpoints["play"], json_data=payload, session_id=session_id)

        penalties = response.get("penalties") or []
        if penalties:
            logger.debug(f"Received {len(penalties)} penalties in round {day}:{hour}")
        return response

    def end_session(self, session_id: Optional[str] = None) -> Dict:
        """
        End the session.

        Returns:
            HourResponseDto with the final report
        """
        session_id = session_id or self.session_id
        logger.info(f"Ending session {session_id}")
        response = self._post(self.endpoints["end"], json_data={}, session_id=session_id)
        self.session_id = None
        if isinstance(response, dict) and "totalCost" in response:
            logger.info(f"Session ended. Final cost: {response['totalCost']}")
        return response

    def stop_existing_session(self) -> bool:
        """
        End whatever session is active for the API key.

        Returns:
            True if a session was stopped, False if none existed
        """
        try:
            self._post(self.endpoints["end"], json_data={})
        except PlatformError as e:
            if e.status_code == 404:
                logger.info(f"No existing session to stop for API key {self.api_key[:8]}...")
                return False
            raise
        logger.info(f"Stopped existing session for API key {self.api_key[:8]}...")
        return True
