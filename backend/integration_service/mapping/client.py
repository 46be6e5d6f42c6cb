"""
HTTP client for the text-generation endpoint (Ollama ``/api/generate``).

One call = one POST with ``stream: false``.  The envelope's ``response``
text is returned verbatim; interpreting it is the repair step's job.
No retries happen here — callers that want resilience wrap the mapper.
"""

from __future__ import annotations

from typing import Any

import httpx

from integration_service.core.logging import get_logger
from integration_service.core.tracing import traceable_step
from integration_service.mapping.errors import (
    GenerationUnavailableError,
    InvalidGenerationResponseError,
)

logger = get_logger(__name__)

# Default timeout for one generation call (seconds)
DEFAULT_TIMEOUT = 120.0
DEFAULT_TEMPERATURE = 0.3
GENERATE_PATH = "/api/generate"


class GenerationClient:
    """
    Sends prompts to a configured generation endpoint.

    Usage::

        client = GenerationClient(host="http://ollama:11434", model="mistral")
        text = await client.generate(prompt)
    """

    def __init__(
        self,
        host: str,
        model: str,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            host: Base URL of the endpoint, e.g. ``http://ollama:11434``.
            model: Model name used when generate() is not given one.
            temperature: Sampling temperature used when generate() is not given one.
            timeout: Per-call timeout in seconds; expiry is a transport failure.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.host = host.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.host}{GENERATE_PATH}"

    @traceable_step(name="ollama_generate", run_type="llm")
    async def generate(
        self,
        prompt: str,
        model: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """
        Generate a completion for `prompt` and return the raw text.

        Raises:
            GenerationUnavailableError: endpoint unreachable, timed out,
                or answered with a non-2xx status.
            InvalidGenerationResponseError: endpoint answered 2xx but the
                body is not a ``{"response": "..."}`` envelope.
        """
        model = model or self.model
        temperature = self.temperature if temperature is None else temperature
        body = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "temperature": temperature,
            "options": {"temperature": temperature},
        }

        logger.debug("Calling generation endpoint", url=self.url, model=model)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self.url, json=body)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Generation endpoint returned an error status",
                url=self.url,
                status_code=exc.response.status_code,
            )
            raise self._unavailable(
                f"HTTP {exc.response.status_code}", model,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TransportError as exc:
            logger.error("Failed to connect to generation endpoint", url=self.url, error=str(exc))
            raise self._unavailable(str(exc) or type(exc).__name__, model) from exc

        return self._read_envelope(response)

    def _unavailable(
        self,
        reason: str,
        model: str,
        status_code: int | None = None,
    ) -> GenerationUnavailableError:
        return GenerationUnavailableError(
            f"Ollama service is unavailable at {self.url} ({reason}). "
            f"Ensure the service is running and the model '{model}' is downloaded. "
            f"Run 'ollama pull {model}' to download the model.",
            url=self.url,
            model=model,
            status_code=status_code,
            step_name="generate",
        )

    @staticmethod
    def _read_envelope(response: httpx.Response) -> str:
        """Pull the ``response`` text out of the endpoint's JSON envelope."""
        text = response.text
        if text.lstrip().startswith("<"):
            raise InvalidGenerationResponseError(
                "Ollama returned HTML instead of JSON. "
                "The service may be unavailable or misconfigured.",
                response_body=text[:500],
                step_name="generate",
            )

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise InvalidGenerationResponseError(
                f"Unexpected response format from Ollama API: {text[:200]}",
                response_body=text[:500],
                step_name="generate",
            ) from exc

        if not isinstance(payload, dict):
            raise InvalidGenerationResponseError(
                f"Invalid response from Ollama API: unexpected type {type(payload).__name__}",
                response_body=text[:500],
                step_name="generate",
            )

        if "response" not in payload:
            raise InvalidGenerationResponseError(
                "Invalid response from Ollama API: missing 'response' field",
                response_body=text[:500],
                step_name="generate",
            )

        generated = payload["response"]
        if not isinstance(generated, str):
            raise InvalidGenerationResponseError(
                f"Invalid response from Ollama API: 'response' is {type(generated).__name__}, expected text",
                response_body=text[:500],
                step_name="generate",
            )
        return generated
