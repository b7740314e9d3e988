# -*- coding: utf-8 -*-
"""LLM backed Move code optimizer."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from anthropic import Anthropic
from anthropic import APIConnectionError as AnthropicConnectionError
from anthropic import APIError as AnthropicAPIError
from openai import OpenAI
from openai import APIConnectionError as OpenAIConnectionError
from openai import APIError as OpenAIAPIError

from app.parsers.response_parser import BaseResponseParser
from app.prompts.optimization_prompt import OPTIMIZATION_USER_PROMPT

logger = logging.getLogger(__name__)

TEMPERATURE = 0.1
MAX_OUTPUT_TOKENS = 2500

DEFAULT_PROVIDER = "deepseek"

PROVIDER_SETTINGS: Dict[str, Dict[str, Optional[str]]] = {
    "deepseek": {
        "label": "DeepSeek",
        "api_key_env": "DEEPSEEK_API_KEY",
        "base_url_env": "DEEPSEEK_BASE_URL",
        "base_url": "https://api.deepseek.com",
        "model": "deepseek-chat",
    },
    "openai": {
        "label": "OpenAI",
        "api_key_env": "OPENAI_API_KEY",
        "base_url_env": "OPENAI_BASE_URL",
        "base_url": None,
        "model": "gpt-4o-mini",
    },
    "claude": {
        "label": "Claude",
        "api_key_env": "CLAUDE_API_KEY",
        "base_url_env": None,
        "base_url": None,
        "model": "claude-sonnet-4-5-20250929",
    },
}


class CodeOptimizer:
    """Send Move code to a completion provider and parse the tagged reply.

    A pre-built ``client`` can be injected; otherwise one is created from the
    provider's environment variables. Without an API key a stub client is
    installed that fails on first use, so the service can still start.
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        client: Any = None,
        model: Optional[str] = None,
    ) -> None:
        provider = (provider or os.getenv("LLM_PROVIDER", DEFAULT_PROVIDER)).strip().lower()
        if provider not in PROVIDER_SETTINGS:
            logger.warning("Unknown LLM provider %r, falling back to %s", provider, DEFAULT_PROVIDER)
            provider = DEFAULT_PROVIDER

        self.provider = provider
        settings = PROVIDER_SETTINGS[provider]
        self.model = model or os.getenv("OPTIMIZER_MODEL") or settings["model"]
        self.client = client if client is not None else self._build_client(settings)

    def _build_client(self, settings: Dict[str, Optional[str]]) -> Any:
        label = settings["label"]
        api_key = os.getenv(settings["api_key_env"] or "")
        api_key_present = bool(api_key)

        base_url = None
        if settings["base_url_env"]:
            base_url = os.getenv(settings["base_url_env"]) or settings["base_url"]

        logger.info(
            "Creating %s client (api_key_set=%s, base_url=%s, model=%s)",
            label,
            api_key_present,
            base_url or "default",
            self.model,
        )

        if api_key_present:
            if self.provider == "claude":
                return Anthropic(api_key=api_key)
            return OpenAI(api_key=api_key, base_url=base_url)

        logger.warning("%s not set, using a stub client.", settings["api_key_env"])

        def _raise_missing_key(*_args: Any, **_kwargs: Any) -> Any:
            raise RuntimeError(f"{label} API key is not configured.")

        if self.provider == "claude":
            messages_stub = type(
                "MessagesStub",
                (),
                {"create": staticmethod(_raise_missing_key)},
            )()
            return type("AnthropicStub", (), {"messages": messages_stub})()

        completions_stub = type(
            "CompletionsStub",
            (),
            {"create": staticmethod(_raise_missing_key)},
        )()
        chat_stub = type("ChatStub", (), {"completions": completions_stub})()
        return type("OpenAIStub", (), {"chat": chat_stub})()

    @staticmethod
    def build_messages(
        code: str,
        goals: Sequence[str],
        analysis_level: str,
        system_prompts: Sequence[str],
    ) -> List[Dict[str, str]]:
        """Compose the system blocks and the user block for one request."""

        messages = [{"role": "system", "content": prompt} for prompt in system_prompts]
        messages.append(
            {
                "role": "user",
                "content": OPTIMIZATION_USER_PROMPT.format(
                    analysis_level=analysis_level,
                    goals=", ".join(goals),
                    code=code,
                ),
            }
        )
        return messages

    def complete(self, messages: List[Dict[str, str]]) -> str:
        """Run a single completion round-trip and return the raw text."""

        logger.debug(
            "Dispatching optimization prompt (provider=%s, model=%s, length=%s chars)",
            self.provider,
            self.model,
            sum(len(message["content"]) for message in messages),
        )
        if self.provider == "claude":
            return self._complete_with_claude(messages)
        return self._complete_with_openai(messages)

    def _complete_with_openai(self, messages: List[Dict[str, str]]) -> str:
        label = PROVIDER_SETTINGS[self.provider]["label"]
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=TEMPERATURE,
                max_tokens=MAX_OUTPUT_TOKENS,
            )
        except (TimeoutError, OpenAIConnectionError, OpenAIAPIError) as exc:  # pragma: no cover - network calls
            logger.exception("%s request failed", label)
            raise RuntimeError(f"{label} request failed: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        raw_text = ""
        if choices:
            message = getattr(choices[0], "message", None)
            raw_text = (getattr(message, "content", None) or "").strip()

        usage = getattr(response, "usage", None)
        logger.debug(
            "%s response received (length=%s chars, tokens=%s)",
            label,
            len(raw_text),
            getattr(usage, "total_tokens", "N/A"),
        )
        return raw_text

    def _complete_with_claude(self, messages: List[Dict[str, str]]) -> str:
        system_instruction = "\n\n".join(
            message["content"] for message in messages if message["role"] == "system"
        )
        conversation = [message for message in messages if message["role"] != "system"]

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_OUTPUT_TOKENS,
                temperature=TEMPERATURE,
                system=system_instruction,
                messages=conversation,
            )
        except (TimeoutError, AnthropicConnectionError, AnthropicAPIError) as exc:  # pragma: no cover - network calls
            logger.exception("Claude request failed")
            raise RuntimeError(f"Claude request failed: {exc}") from exc

        text_chunks = []
        for block in getattr(response, "content", None) or []:
            if getattr(block, "type", "") == "text":
                text_chunks.append(getattr(block, "text", ""))
        raw_text = "".join(text_chunks).strip()

        usage_info: Dict[str, int] = {}
        usage = getattr(response, "usage", None)
        if usage is not None:
            if hasattr(usage, "input_tokens"):
                usage_info["input_tokens"] = usage.input_tokens
            if hasattr(usage, "output_tokens"):
                usage_info["output_tokens"] = usage.output_tokens

        logger.debug(
            "Claude response received (length=%s chars, tokens=%s)",
            len(raw_text),
            sum(usage_info.values()) if usage_info else "N/A",
        )
        return raw_text

    def optimize(
        self,
        code: str,
        goals: Sequence[str],
        analysis_level: str,
        *,
        system_prompts: Sequence[str],
        parser: BaseResponseParser,
    ) -> Dict[str, Any]:
        """Optimize ``code`` and return the fields extracted by ``parser``."""

        messages = self.build_messages(code, goals, analysis_level, system_prompts)
        raw_text = self.complete(messages)
        return parser.parse(raw_text)


__all__ = ["CodeOptimizer", "MAX_OUTPUT_TOKENS", "TEMPERATURE"]
