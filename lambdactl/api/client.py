"""Thin HTTP client for the cloud instance API.

Each call is one request; the caller decides whether to retry. Transport
failures and non-2xx responses both surface as ``ApiError``.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..errors import ApiError, KeyParseError
from .models import Instance, InstanceQuote, Title, parse_offers
from .sshkeys import parse_key

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://cloud.lambdalabs.com/api/v1/"
DEFAULT_TIMEOUT_SECONDS = 20.0


class CloudClient:
    """Authenticated session against the instance API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.auth = (api_key, "")
        self.session.headers.update({"Accept": "application/json"})

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = self.base_url + path
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"{method} {path} failed: {exc}") from exc
        logger.info("%s %s -> %s", method, path, response.status_code)

        if not 200 <= response.status_code < 300:
            raise self._error_from_response(method, path, response)
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(f"{method} {path}: invalid JSON response", status=response.status_code) from exc
        if not isinstance(body, dict) or "data" not in body:
            raise ApiError(f"{method} {path}: response has no data", status=response.status_code)
        return body["data"]

    @staticmethod
    def _error_from_response(method: str, path: str, response: requests.Response) -> ApiError:
        code = ""
        message = f"{method} {path}: response not ok"
        suggestion = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            code = str(error.get("code", ""))
            message = str(error.get("message") or message)
            suggestion = str(error.get("suggestion", ""))
        return ApiError(message, status=response.status_code, code=code, suggestion=suggestion)

    def instances(self) -> list[Instance]:
        """List instances visible to this account."""
        data = self._request("GET", "instances")
        out: list[Instance] = []
        for raw in data or ():
            try:
                out.append(Instance.from_json(raw))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("skipping malformed instance entry: %s", exc)
        return out

    def offers(self) -> dict[Title, InstanceQuote]:
        """Return instance types keyed by each region that has capacity."""
        data = self._request("GET", "instance-types")
        return parse_offers(data or {})

    def ssh_keys(self) -> tuple[dict[str, list[str]], list[str]]:
        """Return ``{normalized_public_key: [names]}`` plus parse errors.

        Keys that fail to parse are left out of the mapping and described in
        the second element instead of failing the whole call.
        """
        data = self._request("GET", "ssh-keys")
        keys: dict[str, list[str]] = {}
        errors: list[str] = []
        for raw in data or ():
            name = str(raw.get("name", ""))
            try:
                key = parse_key(str(raw.get("public_key", "")))
            except KeyParseError as exc:
                errors.append(f"error parsing cloud SSH key {name!r}: {exc}")
                continue
            keys.setdefault(key, []).append(name)
        if errors:
            logger.info("skipped %d malformed cloud SSH keys", len(errors))
        return keys, errors

    def launch(
        self,
        title: Title,
        name: str,
        ssh_key_names: list[str],
        filesystems: list[str] | None = None,
        user_data: str = "",
    ) -> list[str]:
        """Launch one instance of ``title`` and return the new instance ids."""
        payload: dict[str, Any] = {
            "region_name": title.region,
            "instance_type_name": title.model,
            "ssh_key_names": list(ssh_key_names),
        }
        if filesystems:
            payload["file_system_names"] = list(filesystems)
        if name:
            payload["name"] = name
        if user_data:
            payload["user_data"] = user_data
        data = self._request("POST", "instance-operations/launch", payload)
        return [str(instance_id) for instance_id in (data or {}).get("instance_ids", ())]

    def terminate(self, instance_ids: list[str]) -> None:
        self._request("POST", "instance-operations/terminate", {"instance_ids": list(instance_ids)})


__all__ = ["CloudClient", "DEFAULT_BASE_URL"]
