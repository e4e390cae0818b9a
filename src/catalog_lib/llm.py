"""LLM client utilities.

This module provides a Jinja prompt library and a thin ``LLMClient`` wrapper
around the OpenAI SDK. Each call is a single chat-completion request; there
is no retry loop, callers decide what a failure means for their record.
Model selection follows the ``LLM_MODEL`` environment variable, then
``config/config.yaml``.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined


logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant that provides accurate information in JSON format. "
    "Only return the JSON object with no additional text."
)


def _load_file(path: Union[str, Path]) -> str:
    """Load a UTF-8 text file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


class PromptLibrary:
    """Renders the Jinja templates kept under the prompts directory."""

    def __init__(self, prompts_dir: Union[str, Path]) -> None:
        self.prompts_dir = Path(prompts_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.prompts_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )

    def render(self, template: str, **ctx: Any) -> str:
        return self.env.get_template(template).render(**ctx).strip()

    def system_prompt(self, name: str = "system.txt") -> str:
        p = self.prompts_dir / name
        if not p.exists():
            return DEFAULT_SYSTEM_PROMPT
        return _load_file(p).strip()


class LLMClientError(Exception):
    """Base exception for LLM client failures."""


class LLMProviderError(LLMClientError):
    """Raised when the configured provider is unsupported."""


class LLMResponseError(LLMClientError):
    """Raised when the provider call fails or returns unusable content."""


def clean_and_parse_json(text: str) -> Any:
    """
    Extract a JSON value from model text (handles code fences and extra prose).

    Raises ``ValueError`` if no JSON object or array can be recovered.
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("Empty response")
    if text.startswith("```"):
        text = re.sub(r"^```(json)?\s*", "", text)
        text = re.sub(r"\s*```$", "", text).strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for pattern in (r"\{.*\}", r"\[.*\]"):
        m = re.search(pattern, text, flags=re.DOTALL)
        if m:
            try:
                return json.loads(m.group(0))
            except json.JSONDecodeError:
                continue
    raise ValueError(f"Failed to parse JSON from response: {text[:200]}")


class LLMClient:
    """Thin client wrapper for the OpenAI chat API.

    ``client`` may be any object exposing ``chat.completions.create``; when
    omitted an ``openai.OpenAI`` instance is built from ``api_key``.
    """

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: Optional[str] = None,
        *,
        provider: str = "openai",
        temperature: float = 0.3,
        max_tokens: int = 800,
        timeout_s: float = 60.0,
        client: Any = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        if client is not None:
            self._client = client
        elif self.provider == "openai":
            from openai import OpenAI

            self._client = OpenAI(api_key=api_key, timeout=timeout_s)
        else:  # pragma: no cover - only openai currently supported
            raise LLMProviderError(f"Unsupported provider: {self.provider}")

    # ------------------------------------------------------------------
    def complete(self, system_prompt: str, user_prompt: str, *, json_mode: bool = True) -> str:
        """Return the raw text of one chat completion."""
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug("Making OpenAI request using model: %s", self.model)
        try:
            resp = self._client.chat.completions.create(**kwargs)
        except Exception as exc:  # catch provider SDK errors
            raise LLMResponseError(f"Request to {self.model} failed: {exc}") from exc

        try:
            return resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as exc:
            raise LLMResponseError(f"Unexpected response shape from {self.model}") from exc

    def json_call(self, system_prompt: str, user_prompt: str, *, json_mode: bool = True) -> Any:
        """Return the parsed JSON value of one completion.

        ``LLMResponseError`` is raised on transport failures and on bodies
        that contain no parsable JSON.
        """
        text = self.complete(system_prompt, user_prompt, json_mode=json_mode)
        try:
            data = clean_and_parse_json(text)
        except ValueError as exc:
            raise LLMResponseError(str(exc)) from exc
        logger.debug("Received response from model: %s", self.model)
        return data


__all__ = [
    "LLMClient",
    "LLMClientError",
    "LLMProviderError",
    "LLMResponseError",
    "PromptLibrary",
    "clean_and_parse_json",
]
