"""
NVIDIA NIM LLM Provider.

NIM exposes an OpenAI-compatible chat completions endpoint, with an ``nvext``
request extension for guided (schema-constrained) JSON generation.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..guardrails import filter_output

logger = logging.getLogger(__name__)

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)

ALLOWED_ROLES = ("system", "user", "assistant")


@dataclass
class ChatCompletionRequest:
    """Request for a single chat completion."""
    model: str
    messages: List[Dict[str, str]]
    temperature: float = 0.4
    max_tokens: int = 4096
    top_p: float = 0.95
    guided_json: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        for msg in self.messages:
            if msg.get("role") not in ALLOWED_ROLES:
                raise ValueError(f"Unsupported message role: {msg.get('role')!r}")

    def with_temperature(self, temperature: float) -> "ChatCompletionRequest":
        """Copy of this request at a different temperature."""
        return ChatCompletionRequest(
            model=self.model,
            messages=list(self.messages),
            temperature=temperature,
            max_tokens=self.max_tokens,
            top_p=self.top_p,
            guided_json=self.guided_json,
        )


@dataclass
class ChatCompletionResult:
    """Result of a chat completion."""
    content: str
    model: str
    request_id: Optional[str] = None
    tokens_in: int = 0
    tokens_out: int = 0
    latency_ms: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)


class NIMProvider:
    """
    NVIDIA NIM chat provider.

    Transport retries (429/5xx) and timeouts are handled by the OpenAI
    client; errors are logged and re-raised unchanged.
    """

    DEFAULT_BASE_URL = "https://integrate.api.nvidia.com/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 2,
        client: Optional[Any] = None,
    ):
        """
        Initialize NIM provider.

        Args:
            api_key: NVIDIA API key
            base_url: OpenAI-compatible endpoint root
            timeout: Per-request timeout in seconds
            max_retries: Transport-level retries for 429/5xx
            client: Pre-built AsyncOpenAI-compatible client
        """
        if client is None:
            from openai import AsyncOpenAI

            if not api_key:
                logger.warning("NVIDIA_API_KEY is not set. NIM calls will fail until configured.")
            client = AsyncOpenAI(
                api_key=api_key or "missing",
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
            )

        self._client = client
        self.base_url = base_url

        logger.info(f"NIM provider initialized: {base_url}")

    async def chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResult:
        """
        Run a chat completion.

        Args:
            request: Chat completion request

        Returns:
            Completion result with extracted text content
        """
        kwargs: Dict[str, Any] = {
            "model": request.model,
            "messages": request.messages,
            "temperature": request.temperature,
            "top_p": request.top_p,
            "max_tokens": request.max_tokens,
        }
        is_guided = request.guided_json is not None
        if is_guided:
            kwargs["extra_body"] = {"nvext": {"guided_json": request.guided_json}}

        start = time.time()
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error(f"NIM chat completion failed (model={request.model}): {e}")
            raise
        latency_ms = round((time.time() - start) * 1000, 2)

        content = self._extract_content(response, is_guided)
        redactions = 0
        if not is_guided:
            filtered = filter_output(content)
            content, redactions = filtered.text, filtered.redactions

        usage = getattr(response, "usage", None)
        tokens_in = getattr(usage, "prompt_tokens", 0) or 0
        tokens_out = getattr(usage, "completion_tokens", 0) or 0

        logger.info(
            f"[METRICS] model={request.model} latency={latency_ms}ms "
            f"tokens_in={tokens_in} tokens_out={tokens_out} guided={is_guided}"
        )

        return ChatCompletionResult(
            content=content,
            model=getattr(response, "model", None) or request.model,
            request_id=getattr(response, "_request_id", None),
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            metadata={"redactions": redactions},
        )

    @staticmethod
    def _extract_content(response: Any, is_guided: bool) -> str:
        """Pull the text payload out of a completion response."""
        choices = getattr(response, "choices", None) or []
        if not choices:
            logger.warning("Empty response from NIM")
            return ""

        message = getattr(choices[0], "message", None)
        content = (getattr(message, "content", None) or "").strip()

        # Guided JSON responses sometimes land in reasoning_content
        if not content and is_guided:
            content = (getattr(message, "reasoning_content", None) or "").strip()

        if not is_guided:
            content = strip_think_blocks(content)

        return content


def strip_think_blocks(text: str) -> str:
    """Remove <think>...</think> reasoning markup from free-text output."""
    return _THINK_BLOCK.sub("", text).strip()
