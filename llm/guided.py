"""
Guided JSON completion with a single bounded retry.

A schema-constrained call is attempted once; if the output fails to parse or
validate, the identical request is re-sent exactly once at a lower
temperature. The second result replaces the first and is not retried again.
"""

import logging
from typing import Any, Callable, TypeVar

from .providers.nim import ChatCompletionRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuidedOutputError(ValueError):
    """Guided output failed to parse or validate."""

    def __init__(self, message: str, raw_content: str = ""):
        super().__init__(message)
        self.raw_content = raw_content


async def guided_json_completion(
    provider: Any,
    request: ChatCompletionRequest,
    parse: Callable[[str], T],
    retry_temperature: float = 0.0,
) -> T:
    """
    Run a guided JSON completion and parse it, retrying once on invalid output.

    Args:
        provider: Object exposing ``async chat_completion(request)``
        request: Request carrying the ``guided_json`` schema
        parse: Parser that returns a validated value or raises GuidedOutputError
        retry_temperature: Temperature for the single retry

    Returns:
        The parsed value from the first valid attempt

    Raises:
        GuidedOutputError: both attempts produced invalid output
    """
    if request.guided_json is None:
        raise ValueError("guided_json_completion requires a guided_json schema")

    first = await provider.chat_completion(request)
    try:
        return parse(first.content)
    except GuidedOutputError as e:
        logger.info(
            f"Guided output invalid (model={request.model}), "
            f"retrying at temperature={retry_temperature}: {e}"
        )

    retry = await provider.chat_completion(request.with_temperature(retry_temperature))
    try:
        return parse(retry.content)
    except GuidedOutputError as e:
        logger.warning(f"Guided output invalid after retry (model={request.model}): {e}")
        raise
