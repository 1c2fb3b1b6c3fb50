"""
Async client for the voice provider's "add shared voice" endpoint.

Only the success/failure of the call matters to the reconciler, so the
response is reduced to its status code and body text. Transport errors
(httpx.HTTPError subclasses) are not caught here; the caller decides how
to record them.

The api key travels in the ``xi-api-key`` header and is never logged.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elevenlabs.io"
API_KEY_HEADER = "xi-api-key"


@dataclass(frozen=True)
class ProviderResponse:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class VoiceProviderClient:
    """
    Thin async wrapper over httpx.AsyncClient.

    Usage:
        async with VoiceProviderClient() as client:
            resp = await client.add_shared_voice(owner_id, voice_id, api_key)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_url: Provider API root, without trailing path.
            timeout: Per-request timeout in seconds.
            http_client: Pre-built client (tests pass one with a MockTransport).
                Owned by the caller when given.
        """
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )

    async def add_shared_voice(
        self,
        public_owner_id: str,
        voice_id: str,
        api_key: str,
        new_name: Optional[str] = None,
    ) -> ProviderResponse:
        """Add a shared-library voice to the account that owns ``api_key``.

        Args:
            public_owner_id: Public id of the account that published the voice.
            voice_id: Shared voice id; kept unchanged in the target account.
            api_key: Secret of the target account.
            new_name: Optional display name override.

        Returns:
            ProviderResponse with the raw status code and body text.

        Raises:
            httpx.HTTPError: on connection, timeout or protocol failures.
        """
        body: Dict[str, Any] = {}
        if new_name:
            body["new_name"] = new_name

        response = await self._http.post(
            f"/v1/voices/add/{public_owner_id}/{voice_id}",
            headers={API_KEY_HEADER: api_key},
            json=body,
        )
        logger.debug(
            "add_shared_voice %s/%s -> %d", public_owner_id, voice_id, response.status_code
        )
        return ProviderResponse(status_code=response.status_code, text=response.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "VoiceProviderClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
