# services/gateway_service.py
# Client for the hosted LLM gateway (OpenAI-compatible chat/completions endpoint).
import json
import logging

import httpx

from studygenie import config
from studygenie.services.errors import ConfigurationError, GatewayError, GenerationError

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "Failed to parse AI response. The AI returned invalid JSON format."


def strip_code_fences(raw: str) -> str:
    """Removes a ```json ... ``` (or bare ```) wrapper some models add despite instructions."""
    text = raw.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class GatewayClient:
    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else config.LLM_GATEWAY_API_KEY
        self.url = url or config.LLM_GATEWAY_URL
        self.model = model or config.LLM_MODEL_NAME
        self.timeout = timeout or config.LLM_TIMEOUT_SECONDS
        self.transport = transport

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Sends one system + user exchange and returns the raw message content."""
        if not self.api_key:
            raise ConfigurationError("LLM_GATEWAY_API_KEY not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "response_format": {"type": "json_object"},
        }

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.post(self.url, json=body, headers=headers)
            except httpx.RequestError as exc:
                logger.error("Request error calling LLM gateway: %s", exc)
                raise GatewayError(f"Could not connect to AI gateway: {exc}") from exc

        if response.status_code == 429:
            logger.error("AI API error: 429 %s", response.text)
            raise GatewayError("AI rate limit exceeded, please try again later.", upstream_status=429)
        if response.status_code == 402:
            logger.error("AI API error: 402 %s", response.text)
            raise GatewayError("AI credits exhausted, please add funds to continue.", upstream_status=402)
        if response.is_error:
            logger.error("AI API error: %s %s", response.status_code, response.text)
            raise GatewayError(f"AI API error: {response.status_code}", upstream_status=response.status_code)

        try:
            return response.json()["choices"][0]["message"]["content"] or ""
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            logger.error("Unexpected AI gateway payload: %s", response.text[:500])
            raise GenerationError("AI gateway returned an unexpected response.") from e

    async def complete_json(self, system_prompt: str, user_prompt: str) -> dict:
        raw_content = await self.complete(system_prompt, user_prompt)
        logger.debug("Raw AI content (first 500 chars): %s", raw_content[:500])
        try:
            content = json.loads(strip_code_fences(raw_content))
        except json.JSONDecodeError as e:
            logger.error("JSON parse error: %s. Failed to parse content: %s", e, raw_content[:500])
            raise GenerationError(PARSE_ERROR_MESSAGE) from e
        if not isinstance(content, dict):
            raise GenerationError(PARSE_ERROR_MESSAGE)
        return content


def get_gateway() -> GatewayClient:
    """FastAPI dependency; tests override it with a client on httpx.MockTransport."""
    return GatewayClient()
