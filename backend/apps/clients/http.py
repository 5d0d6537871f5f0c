from __future__ import annotations

from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter

from apps.common import get_logger
from .exceptions import RemoteNotFoundError, RemoteServiceError

logger = get_logger(__name__).bind(component="clients", layer="http")


class ServiceClient:
    """
    Base for typed HTTP clients of sibling services.

    No retries and no circuit breaking: a transport error or an error status
    is raised immediately as ``RemoteServiceError`` (``RemoteNotFoundError``
    for 404).
    """

    service_name = "remote-service"

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or self._build_session()
        self.logger = logger.bind(service=self.service_name)

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"Accept": "application/json"})
        return session

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self._url(path)
        self.logger.debug("Calling remote service", method=method, url=url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            self.logger.error(
                "Remote service unreachable", method=method, url=url, error=str(exc)
            )
            raise RemoteServiceError(
                self.service_name, f"{self.service_name} is unreachable"
            ) from exc

        if response.status_code == 404:
            self.logger.info("Remote resource not found", method=method, url=url)
            raise RemoteNotFoundError(
                self.service_name, f"Resource not found at {self.service_name}"
            )
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            self.logger.error(
                "Remote service returned an error",
                method=method,
                url=url,
                status=response.status_code,
            )
            raise RemoteServiceError(
                self.service_name,
                f"{self.service_name} responded with status {response.status_code}",
                remote_status=response.status_code,
            ) from exc

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            self.logger.error(
                "Remote service returned a non-JSON body",
                method=method,
                url=url,
                status=response.status_code,
            )
            raise RemoteServiceError(
                self.service_name,
                f"{self.service_name} returned an unreadable response",
                remote_status=response.status_code,
            ) from exc

    def get(self, path: str, **kwargs) -> Any:
        return self._request("GET", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self._request("PUT", path, **kwargs)
