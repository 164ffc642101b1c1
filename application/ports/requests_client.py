# application/ports/requests_client.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

import requests

from application.ports.http_client import HttpClientError, HttpClientPort, HttpResponse

DEFAULT_TIMEOUT_SEC = 30


class RequestsSessionHttpClient(HttpClientPort):
    """
    ``requests.Session`` backed client shared by all requests of a run, so
    cookies set by one request are sent by the following ones.
    """

    def __init__(
        self,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        cacert: Optional[str] = None,
        insecure: bool = False,
    ):
        self._session = requests.Session()
        self._timeout = timeout_sec
        self._verify: Union[bool, str] = True
        if insecure:
            self._verify = False
        elif cacert:
            self._verify = cacert

    @property
    def verify(self) -> Union[bool, str]:
        return self._verify

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Any = None,
        files: Optional[List[Tuple[str, Tuple[None, str]]]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> HttpResponse:
        try:
            resp = self._session.request(
                method=method.upper(),
                url=url,
                headers=headers or {},
                data=data,
                files=files or None,
                auth=auth,
                timeout=self._timeout,
                verify=self._verify,
            )
        except requests.RequestException as e:
            raise HttpClientError(str(e)) from e

        return HttpResponse(
            status=resp.status_code,
            reason=resp.reason or "",
            url=str(resp.url),
            text=resp.text,
            headers=dict(resp.headers),
            elapsed_ms=round(resp.elapsed.total_seconds() * 1000),
            content=resp.content,
        )

    def close(self) -> None:
        self._session.close()
