"""OpenRouter chat completion client used for cover extraction and summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from coverscan.analysis.config import AnalysisSettings


@dataclass(slots=True)
class GenerationRequestError(RuntimeError):
    """Domain error raised for failed text generation requests."""

    model: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (model={self.model})"


def _build_default_client(settings: AnalysisSettings) -> Any:
    try:
        from openai import AsyncOpenAI
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise GenerationRequestError(
            model=settings.vision_model,
            message=f"OpenAI SDK unavailable for OpenRouter client: {exc}",
        ) from exc

    return AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.http_timeout_seconds,
    )


def _extract_text(response: Any, *, model: str) -> str:
    choices = getattr(response, "choices", None)
    if not isinstance(choices, list) or not choices:
        raise GenerationRequestError(model=model, message="Generation response missing choices")

    first = choices[0]
    message = getattr(first, "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if content is None and isinstance(first, dict):
        message_dict = first.get("message", {})
        if isinstance(message_dict, dict):
            content = message_dict.get("content")

    if isinstance(content, list):
        content = "".join(str(part.get("text", "")) for part in content if isinstance(part, dict))

    return str(content or "")


class OpenRouterGenerator:
    """Single-attempt OpenRouter text generation from plain or image prompts."""

    def __init__(self, settings: AnalysisSettings, *, client: Any | None = None) -> None:
        self._settings = settings
        self._client = client or _build_default_client(settings)

    async def generate_text(
        self,
        *,
        prompt: str,
        model: str,
        system_prompt: str | None = None,
        temperature: float = 0.4,
        max_tokens: int = 700,
    ) -> str:
        prompt_text = prompt.strip()
        if not prompt_text:
            raise ValueError("prompt cannot be empty")

        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt_text})

        return await self._request_generation(
            messages=messages,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def generate_from_image(
        self,
        *,
        image_url: str,
        prompt: str,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 200,
    ) -> str:
        prompt_text = prompt.strip()
        if not prompt_text:
            raise ValueError("prompt cannot be empty")
        if not image_url:
            raise ValueError("image_url cannot be empty")

        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": image_url}},
                    {"type": "text", "text": prompt_text},
                ],
            }
        ]
        return await self._request_generation(
            messages=messages,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def _request_generation(
        self,
        *,
        messages: list[dict[str, Any]],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        model_name = model.strip()
        if not model_name:
            raise ValueError("model cannot be empty")
        if max_tokens < 1:
            raise ValueError("max_tokens must be >= 1")

        try:
            response = await self._client.chat.completions.create(
                model=model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            raise GenerationRequestError(
                model=model_name,
                message=f"Generation request failed: {exc}",
            ) from exc

        return _extract_text(response, model=model_name)
