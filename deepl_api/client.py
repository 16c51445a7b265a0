"""
DeepL API Client
----------------
Thin async wrapper around the DeepL Pro REST API (v2).

Rules:
- One outbound POST per operation, no retries
- Every operation goes through one dispatch routine
- The API key is never logged or shown in repr()
"""

from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

import httpx

from infra.config import ClientConfig, resolve_api_key
from infra.logging import RequestContext, get_logger

from .errors import (
    AuthorizationError, DeepLError, DeserializationError,
    ServerError, TransportError, log_level_for,
)
from .models import (
    LanguageInformation, LanguageList, TranslatableTextList,
    TranslatedText, TranslationOptions, UsageInformation,
)

T = TypeVar("T")

FREE_HOST_SUFFIX = "-free"
DEFAULT_TIMEOUT_SECONDS = 30.0


class DeepL:
    """
    A DeepL developer account with an associated API key.

    Create one instance per account; the instance is read-only after
    construction and can be shared between concurrent tasks.

    Example:
        deepl = DeepL(os.environ["DEEPL_API_KEY"], free_tier=True)
        usage = await deepl.usage_information()
    """

    def __init__(
        self,
        api_key: str,
        free_tier: bool = False,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._free_tier = free_tier
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._logger = get_logger("client")

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "DeepL":
        """Create a client from configuration, reading the key from the environment."""
        api_key = resolve_api_key(config)
        return cls(
            api_key,
            free_tier=config.resolve_free_tier(api_key),
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

    @property
    def free_tier(self) -> bool:
        return self._free_tier

    @property
    def base_url(self) -> str:
        suffix = FREE_HOST_SUFFIX if self._free_tier else ""
        return f"https://api{suffix}.deepl.com/v2"

    def __repr__(self) -> str:
        return f"DeepL(base_url={self.base_url!r})"

    async def usage_information(self) -> UsageInformation:
        """
        Retrieve API usage and limits for the current billing period.

        This also verifies an API key without consuming translation quota.
        """
        return await self._request("/usage", [], UsageInformation.from_dict)

    async def source_languages(self) -> LanguageList:
        """Retrieve all languages that can be translated from."""
        return await self._languages("source")

    async def target_languages(self) -> LanguageList:
        """Retrieve all languages that can be translated into."""
        return await self._languages("target")

    async def _languages(self, language_type: str) -> LanguageList:
        return await self._request(
            "/languages",
            [("type", language_type)],
            LanguageInformation.list_from_response,
        )

    async def translate(
        self,
        text_list: TranslatableTextList,
        options: Optional[TranslationOptions] = None,
    ) -> List[TranslatedText]:
        """
        Translate one or more texts at once.

        Returns one TranslatedText per input text, in input order. When no
        source language was given, DeepL reports the one it detected. A reply
        with a different number of translations raises DeserializationError.
        """
        params = text_list.to_params()
        if options is not None:
            params.extend(options.to_params())
        expected = len(text_list.texts)

        def decode(payload: Any) -> List[TranslatedText]:
            translations = TranslatedText.list_from_response(payload)
            if len(translations) != expected:
                raise DeserializationError(
                    f"expected {expected} translations, got {len(translations)}"
                )
            return translations

        return await self._request("/translate", params, decode)

    async def _request(
        self,
        endpoint: str,
        params: Sequence[Tuple[str, str]],
        decode: Callable[[Any], T],
    ) -> T:
        """Perform one POST, classify the status and decode the JSON body."""
        url = f"{self.base_url}{endpoint}"
        payload = list(params)
        payload.append(("auth_key", self._api_key))

        with RequestContext() as request_id:
            self._logger.debug(
                f"POST {endpoint}",
                extra={"endpoint": endpoint, "request_id": request_id},
            )
            start_time = datetime.now()

            try:
                try:
                    async with httpx.AsyncClient(
                        timeout=self._timeout_seconds,
                        transport=self._transport,
                    ) as client:
                        response = await client.post(url, params=payload)
                except httpx.HTTPError as e:
                    raise TransportError(e) from e

                elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
                self._logger.debug(
                    f"{endpoint} answered {response.status_code} in {elapsed_ms:.1f}ms",
                    extra={
                        "endpoint": endpoint,
                        "status_code": response.status_code,
                        "elapsed_ms": elapsed_ms,
                        "request_id": request_id,
                    },
                )

                return decode(self._classify(response))

            except DeepLError as e:
                self._logger.log(
                    log_level_for(e),
                    f"{endpoint} failed: {e}",
                    extra={
                        "endpoint": endpoint,
                        "error_kind": e.kind.name,
                        "request_id": request_id,
                    },
                )
                raise

    @staticmethod
    def _classify(response: httpx.Response) -> Any:
        """Map the HTTP status to a parsed body or a raised error."""
        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise DeserializationError(f"body is not JSON: {e}") from e

        if response.status_code in (401, 403):
            raise AuthorizationError()

        # DeepL sends error messages in the body; prefer them over the status line
        message = _server_message(response)
        if message is None:
            # Non-standard codes such as 456 have no reason phrase: the code alone
            message = f"{response.status_code} {response.reason_phrase}".strip()
        raise ServerError(message)


def _server_message(response: httpx.Response) -> Optional[str]:
    """Extract ``message`` from a ``{"message": ...}`` error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None
