"""Generic JSON client for the upstream LINC REST API.

Every console operation reaches the upstream API through LincApiClient:
get/post/put/delete with the caller's bearer token and request id injected.
Upstream failures are converted into the LincAdminError hierarchy here, so
call sites never inspect httpx responses themselves.
"""

import logging
import re
from typing import Any

import httpx

from linc_admin.errors import (
    ConflictError,
    ForbiddenError,
    LincAdminError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
    UpstreamUnavailableError,
    ValidationError,
)
from linc_admin.middleware import get_request_id

logger = logging.getLogger(__name__)

_VALIDATION_CODE_RE = re.compile(r"^\s*(V\d{5})\b")

_STATUS_ERRORS: dict[int, type[LincAdminError]] = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop unset filters; booleans go over the wire as 'true'/'false'."""
    if not params:
        return None
    cleaned: dict[str, Any] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif hasattr(value, "value"):
            value = value.value
        cleaned[key] = value
    return cleaned


def extract_error(status_code: int, body: Any) -> tuple[str, str | None, list[str]]:
    """Pull a human message, an optional Vxxxxx code and the raw error list
    out of an upstream error body.

    Handles the shapes the LINC API returns:
      {"detail": "message"}
      {"detail": {"errors": ["V06003: User Name must be unique", ...]}}
      {"detail": [{"loc": [...], "msg": "..."}]}   (request validation)
      {"message": "..."}
    """
    fallback = f"API request failed with status {status_code}"
    if not isinstance(body, dict):
        return fallback, None, []

    detail = body.get("detail")
    errors: list[str] = []
    if isinstance(detail, str) and detail:
        errors = [detail]
    elif isinstance(detail, dict) and detail.get("errors"):
        errors = [str(e) for e in detail["errors"]]
    elif isinstance(detail, dict) and detail.get("message"):
        errors = [str(detail["message"])]
    elif isinstance(detail, list) and detail:
        for item in detail:
            if isinstance(item, dict):
                loc = ".".join(str(p) for p in item.get("loc", []) if p != "body")
                msg = item.get("msg", "")
                errors.append(f"{loc}: {msg}" if loc else msg)
            else:
                errors.append(str(item))

    if errors:
        match = _VALIDATION_CODE_RE.match(errors[0])
        return ", ".join(errors), match.group(1) if match else None, errors

    if body.get("message"):
        return str(body["message"]), None, []
    return fallback, None, []


class LincApiClient:
    """Thin request helper bound to one caller's bearer token.

    The underlying httpx.AsyncClient is shared by the whole app; this object
    is cheap and created per request.
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, token: str | None) -> None:
        self._http = http_client
        self.base_url = base_url.rstrip("/")
        self._token = token

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = self.url(path)
        try:
            response = await self._http.request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning("LINC API %s %s failed: %s", method, url, exc)
            raise UpstreamUnavailableError("LINC API is unavailable") from exc

        if response.status_code == 204 or not response.content:
            if response.is_success:
                return None

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            error_cls = None if response.is_success else _STATUS_ERRORS.get(response.status_code)
            if error_cls is not None:
                logger.warning(
                    "LINC API %s %s returned %s without a JSON body",
                    method,
                    url,
                    response.status_code,
                )
                raise error_cls(f"API request failed with status {response.status_code}")
            logger.error(
                "Non-JSON response from %s %s: %s", method, url, response.text[:200]
            )
            raise UpstreamError(
                f"API returned non-JSON response. Status: {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"API returned malformed JSON. Status: {response.status_code}"
            ) from exc

        if response.is_success:
            return body

        message, validation_code, errors = extract_error(response.status_code, body)
        logger.warning(
            "LINC API %s %s returned %s: %s", method, url, response.status_code, message
        )
        if validation_code or response.status_code in (400, 422):
            details = {"errors": errors} if len(errors) > 1 else None
            raise ValidationError(message, details=details, validation_code=validation_code)
        error_cls = _STATUS_ERRORS.get(response.status_code, UpstreamError)
        raise error_cls(message)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self, path: str, data: Any = None, params: dict[str, Any] | None = None
    ) -> Any:
        return await self.request("POST", path, params=params, json=data)

    async def put(self, path: str, data: Any = None) -> Any:
        return await self.request("PUT", path, json=data)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)
