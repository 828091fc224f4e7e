"""Model Gateway — the single boundary to the hosted text-generation backend.

One `ModelGateway` is built at process start (`ModelGateway.from_env()`) and
handed to the question / blueprint pipeline through FastAPI dependencies.
This ensures:
  - Model, temperature, timeout, and token limits are read from env once.
  - The API key never leaves the server process.
  - Every failure (network, timeout, non-2xx, empty completion) surfaces
    as a single `GatewayError`.
  - NO retries and NO caching — the caller decides what to do on failure.
"""

from __future__ import annotations

import os
import time
from typing import Any, Dict, List, Optional

import httpx

from ..errors import GatewayError

# ---------------------------------------------------------------------------
# Constants — all read from environment with safe defaults
# ---------------------------------------------------------------------------
_OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
_DEFAULT_MODEL = "gpt-4.1-mini"
_DEFAULT_SYSTEM_PROMPT = "Return valid JSON only."


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


class ModelGateway:
    """Thin async client over the OpenAI chat completions endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str = _DEFAULT_MODEL,
        temperature: float = 0.55,
        timeout: float = 40.0,
        max_completion_tokens: int = 2000,
        api_url: str = _OPENAI_API_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.max_completion_tokens = max_completion_tokens
        self.api_url = api_url
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_env(cls, http_client: Optional[httpx.AsyncClient] = None) -> "ModelGateway":
        """Build a gateway from OPENAI_* environment variables.

        A missing key is not fatal here: the server still boots and every
        `complete()` call fails with GatewayError until a key is configured.
        """
        return cls(
            api_key=os.getenv("OPENAI_API_KEY", "").strip(),
            model=os.getenv("OPENAI_MODEL", _DEFAULT_MODEL).strip() or _DEFAULT_MODEL,
            temperature=_env_float("OPENAI_TEMPERATURE", 0.55),
            timeout=_env_float("OPENAI_REQUEST_TIMEOUT", 40.0),
            max_completion_tokens=_env_int("OPENAI_MAX_COMPLETION_TOKENS", 2000),
            api_url=os.getenv("OPENAI_API_URL", _OPENAI_API_URL).strip() or _OPENAI_API_URL,
            http_client=http_client,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def build_payload(self, prompt: str, schema_hint: Optional[str] = None) -> Dict[str, Any]:
        """Build a chat completions payload.

        When a schema hint is given it becomes the system message and JSON
        response mode is switched on.
        """
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": schema_hint or _DEFAULT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_completion_tokens,
            "temperature": self.temperature,
        }
        if schema_hint:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def complete(self, prompt: str, schema_hint: Optional[str] = None) -> str:
        """Send ``prompt`` to the model and return its raw text reply.

        The reply may be pure JSON, fenced JSON, or JSON wrapped in prose —
        parsing is the normalizer's job.

        Raises
        ------
        GatewayError
            Missing credential, network error, timeout, non-2xx status,
            malformed envelope, or an empty completion.
        """
        if not self.configured:
            print("⚠️  [GATEWAY] API key missing (OPENAI_API_KEY)")
            raise GatewayError("OPENAI_API_KEY environment variable not set")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(prompt, schema_hint)

        t0 = time.time()
        print(f"🧠 [GATEWAY] Calling {self.model}")
        try:
            response = await self._client.post(
                self.api_url,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            print(f"❌ [GATEWAY] Timeout ({time.time() - t0:.1f}s)")
            raise GatewayError(f"Model request timed out after {self.timeout:.0f}s") from exc
        except httpx.HTTPError as exc:
            print(f"❌ [GATEWAY] Network error: {exc}")
            raise GatewayError(f"Model request failed: {exc}") from exc

        print(f"📦 [GATEWAY] HTTP {response.status_code} ({time.time() - t0:.1f}s)")

        if not response.is_success:
            print(f"⚠️  [GATEWAY] Error response: {response.text[:400]}")
            raise GatewayError(f"Model backend returned HTTP {response.status_code}")

        try:
            data = response.json()
            raw_content = data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise GatewayError("Model backend returned a malformed response") from exc

        usage = data.get("usage")
        if usage:
            print(f"🧠 [GATEWAY] Tokens used: prompt={usage.get('prompt_tokens', '?')}, completion={usage.get('completion_tokens', '?')}, total={usage.get('total_tokens', '?')}")

        raw_content = str(raw_content).strip()
        if not raw_content:
            print("⚠️  [GATEWAY] Empty completion")
            raise GatewayError("Model backend returned an empty completion")

        print(f"🧠 [GATEWAY] Raw output length: {len(raw_content)} chars")
        return raw_content

    async def aclose(self) -> None:
        await self._client.aclose()
