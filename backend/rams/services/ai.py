"""Claude AI service wrapper.

All drafting, validation and review calls go through this module. Every
call is bounded by the configured request timeout.
"""

import json
import logging
import time
from dataclasses import dataclass

import anthropic

from rams.config import get_settings

logger = logging.getLogger(__name__)

MODEL_MAP = {
    "haiku": "claude-haiku-4-5-20251001",
    "sonnet": "claude-sonnet-4-5-20250929",
    "opus": "claude-opus-4-5-20250620",
}


class AIServiceError(RuntimeError):
    """The model could not be reached or returned nothing usable."""


@dataclass
class AIResponse:
    content: str
    tokens_used: dict  # { "input": int, "output": int }
    model: str
    latency_ms: int


def is_ai_configured() -> bool:
    return get_settings().ai_configured


def _get_client() -> anthropic.Anthropic:
    settings = get_settings()
    return anthropic.Anthropic(
        api_key=settings.anthropic_api_key,
        timeout=settings.ai_timeout_seconds,
        max_retries=settings.ai_max_retries,
    )


def generate_response(
    *,
    system_prompt: str,
    user_prompt: str,
    model: str | None = None,
    max_tokens: int = 2000,
    temperature: float = 0.3,
) -> AIResponse:
    """Generate a Claude response.

    Args:
        system_prompt: System instructions.
        user_prompt: User message text.
        model: One of "haiku", "sonnet", "opus". Defaults to settings.ai_model.
        max_tokens: Maximum output tokens.
        temperature: Sampling temperature.

    Raises:
        AIServiceError: AI is disabled or not configured, or the API call
            failed, timed out or returned a non-2xx status.
    """
    settings = get_settings()
    if not settings.ai_configured:
        raise AIServiceError("AI API key not configured")

    client = _get_client()
    model_id = MODEL_MAP.get(model or settings.ai_model, MODEL_MAP["sonnet"])

    start = time.monotonic()
    try:
        response = client.messages.create(
            model=model_id,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
    except anthropic.APITimeoutError as exc:
        raise AIServiceError("AI request timed out") from exc
    except anthropic.APIStatusError as exc:
        raise AIServiceError(f"AI API error: {exc.status_code}") from exc
    except anthropic.APIError as exc:
        raise AIServiceError(f"AI API error: {exc}") from exc
    latency_ms = int((time.monotonic() - start) * 1000)

    text = ""
    if response.content and response.content[0].type == "text":
        text = response.content[0].text

    logger.info(
        "AI call %s: %d in / %d out tokens in %d ms",
        model_id, response.usage.input_tokens, response.usage.output_tokens, latency_ms,
    )
    return AIResponse(
        content=text,
        tokens_used={
            "input": response.usage.input_tokens,
            "output": response.usage.output_tokens,
        },
        model=model_id,
        latency_ms=latency_ms,
    )


def extract_json_object(content: str) -> dict | None:
    """Parse a JSON object from a model reply.

    Tolerates markdown code fences and prose around the object. Returns
    None when no object can be recovered.
    """
    text = content.strip()
    if text.startswith("```"):
        lines = [l for l in text.split("\n") if not l.strip().startswith("```")]
        text = "\n".join(lines)

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return None

    return parsed if isinstance(parsed, dict) else None
