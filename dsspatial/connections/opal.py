"""Opal DataSHIELD connection over HTTP."""

import base64
import logging
from typing import Any

import httpx

from dsspatial.config import CONSTANTS
from dsspatial.dispatch.errors import RemoteEvaluationFailure
from dsspatial.dispatch.serializer import class_call, colnames_call, exists_call, serialize

logger = logging.getLogger(__name__)


def _first(result: Any) -> Any:
    """Unwrap a length-one vector returned as a JSON array."""
    if isinstance(result, list):
        return result[0] if result else None
    return result


class OpalConnection:
    """Handles one DataSHIELD session on an Opal server.

    Assignments and aggregations are synchronous (``async=false``): each call
    blocks until the server has evaluated the expression.
    """

    def __init__(
        self,
        name: str,
        url: str,
        user: str,
        password: str,
        timeout: float = 300.0,
        verify: bool = True,
        profile: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.name = name
        self.url = url.rstrip("/")
        self.profile = profile
        self.session_id: str | None = None

        token = base64.b64encode(f"{user}:{password}".encode()).decode("ascii")
        self._client = httpx.Client(
            base_url=f"{self.url}{CONSTANTS.API_PREFIX}",
            headers={
                "Authorization": f"{CONSTANTS.AUTH_SCHEME} {token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            verify=verify,
            transport=transport,
        )

    def open(self) -> "OpalConnection":
        """Create the DataSHIELD session."""
        params = {"profile": self.profile} if self.profile else None
        response = self._request("POST", "/datashield/sessions", params=params)
        self.session_id = str(response.json()["id"])
        logger.info(f"Opened DataSHIELD session {self.session_id} on {self.name} ({self.url})")
        return self

    def assign_table(self, symbol: str, table: str) -> None:
        """Assign a project table to a workspace symbol."""
        self._request(
            "PUT",
            f"{self._session_path}/symbol/{symbol}",
            params={"async": "false"},
            content=table,
            headers={"Content-Type": CONSTANTS.CONTENT_TYPE_TABLE},
        )
        logger.info(f"Assigned table {table} to '{symbol}' on {self.name}")

    def assign(self, symbol: str, expression: str) -> None:
        self._request(
            "PUT",
            f"{self._session_path}/symbol/{symbol}",
            params={"async": "false"},
            content=expression,
            headers={"Content-Type": CONSTANTS.CONTENT_TYPE_RSCRIPT},
        )

    def aggregate(self, expression: str) -> Any:
        """Evaluate an aggregate expression and return its JSON result."""
        response = self._request(
            "POST",
            f"{self._session_path}/aggregate",
            params={"async": "false"},
            content=expression,
            headers={"Content-Type": CONSTANTS.CONTENT_TYPE_RSCRIPT},
        )
        try:
            return response.json()
        except ValueError as e:
            raise RemoteEvaluationFailure(
                self.name, f"Aggregate result of {expression} is not JSON"
            ) from e

    def exists(self, symbol: str) -> bool:
        return _first(self.aggregate(serialize(exists_call(symbol)))) is True

    def class_of(self, symbol: str) -> str:
        result = _first(self.aggregate(serialize(class_call(symbol))))
        if not isinstance(result, str):
            raise RemoteEvaluationFailure(self.name, f"Unexpected class of '{symbol}': {result!r}")
        return result

    def column_names(self, symbol: str) -> list[str]:
        result = self.aggregate(serialize(colnames_call(symbol)))
        if isinstance(result, str):
            return [result]
        return [str(column) for column in result or []]

    def close(self) -> None:
        """Delete the DataSHIELD session and close the HTTP client."""
        try:
            if self.session_id is not None:
                self._request("DELETE", self._session_path)
                logger.info(f"Closed DataSHIELD session {self.session_id} on {self.name}")
        except RemoteEvaluationFailure as e:
            logger.warning(f"Failed to close session on {self.name}: {e}")
        finally:
            self.session_id = None
            self._client.close()

    @property
    def _session_path(self) -> str:
        if self.session_id is None:
            raise RemoteEvaluationFailure(self.name, "No open DataSHIELD session")
        return f"/datashield/session/{self.session_id}"

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text.strip() or e.response.reason_phrase
            raise RemoteEvaluationFailure(
                self.name, f"{method} {path} returned {e.response.status_code}: {detail}"
            ) from e
        except httpx.HTTPError as e:
            raise RemoteEvaluationFailure(self.name, f"{method} {path} failed: {e}") from e
        return response
