from typing import Any

import httpx

from civicscan.inference.client_base import BaseInferenceClient
from civicscan.inference.exceptions import ProviderTransportError

_DETAIL_MAX_CHARS = 200


class HttpxInferenceClient(BaseInferenceClient):
    """Inference transport built on a shared httpx.Client."""

    def __init__(
        self,
        *,
        user_agent: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            headers={"User-Agent": user_agent},
            transport=transport,
            follow_redirects=False,
        )

    def post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        timeout: float,
        params: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = self._client.post(
                url,
                headers=headers,
                params=params,
                files=files,
                json=json_body,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            raise ProviderTransportError(f"Request timed out after {timeout}s") from exc
        except httpx.HTTPError as exc:
            raise ProviderTransportError(f"Provider network error: {exc}") from exc

        if not response.is_success:
            raise ProviderTransportError(
                f"Provider returned HTTP {response.status_code}: {self._detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderTransportError(
                "Provider returned a non-JSON body",
                status_code=response.status_code,
            ) from exc

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:_DETAIL_MAX_CHARS]
        if isinstance(body, dict) and "detail" in body:
            return str(body["detail"])[:_DETAIL_MAX_CHARS]
        return str(body)[:_DETAIL_MAX_CHARS]
