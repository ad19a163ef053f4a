"""HTTP client for listing and deleting resources on the hosting platform."""

from __future__ import annotations

import json
from typing import Any, Callable, List, Mapping, TypeVar

import requests

from .models import Owner, Postgres, Redis, Service, _lookup

T = TypeVar("T")

_PAGE_LIMIT = 20


class RenderError(Exception):
    """Raised when a request to the API fails."""


class Client:
    """Talks to the platform's REST API with a bearer token."""

    def __init__(self, api_endpoint: str, api_token: str) -> None:
        self.api_endpoint = api_endpoint
        self.api_token = api_token

    def _request(self, method: str, url: str) -> Any:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_token}",
        }
        try:
            response = requests.request(method, url, headers=headers)
        except requests.RequestException as exc:
            raise RenderError(f"failed to send HTTP request: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise RenderError(f"{response.status_code} response")

        body = response.content
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError as exc:
            raise RenderError(f"failed to parse json: {exc}") from exc

    def _list(
        self,
        url: str,
        key: str,
        decode: Callable[[Any], T],
    ) -> List[T]:
        payload = self._request("GET", url)
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise RenderError(
                f"failed to parse json: expected array, got {type(payload).__name__}"
            )
        items: List[T] = []
        for entry in payload:
            if entry is not None and not isinstance(entry, Mapping):
                raise RenderError(
                    f"failed to parse json: expected object, got {type(entry).__name__}"
                )
            try:
                items.append(decode(_lookup(entry or {}, key)))
            except ValueError as exc:
                raise RenderError(f"failed to parse json: {exc}") from exc
        return items

    def _list_url(self, path: str, owner_id: str) -> str:
        url = f"https://{self.api_endpoint}/v1/{path}"
        if owner_id:
            url += f"&ownerId={owner_id}"
        return url

    def _delete(self, resource_type: str, resource_id: str) -> None:
        url = f"https://{self.api_endpoint}/v1/{resource_type}/{resource_id}"
        payload = self._request("DELETE", url)
        if payload is not None and not isinstance(payload, Mapping):
            raise RenderError(
                f"failed to parse json: expected object, got {type(payload).__name__}"
            )

    def list_services(self, owner_id: str) -> List[Service]:
        url = self._list_url(f"services?type=&limit={_PAGE_LIMIT}", owner_id)
        return self._list(url, "service", Service.from_json)

    def delete_service(self, service_id: str) -> None:
        self._delete("services", service_id)

    def list_postgres(self, owner_id: str) -> List[Postgres]:
        url = self._list_url(f"postgres?limit={_PAGE_LIMIT}", owner_id)
        return self._list(url, "postgres", Postgres.from_json)

    def delete_postgres(self, postgres_id: str) -> None:
        self._delete("postgres", postgres_id)

    def list_redis(self, owner_id: str) -> List[Redis]:
        url = self._list_url(f"redis?limit={_PAGE_LIMIT}", owner_id)
        return self._list(url, "redis", Redis.from_json)

    def delete_redis(self, redis_id: str) -> None:
        self._delete("redis", redis_id)

    def list_authorized_owners(self) -> List[Owner]:
        url = f"https://{self.api_endpoint}/v1/owners?limit={_PAGE_LIMIT}"
        return self._list(url, "owner", Owner.from_json)