"""OpenAI client for bilingual article summarization."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from src.shared.utils.config_validator import ConfigurationError, check_config_override
from ..contracts.config import LLMSettings
from ..contracts.summary import SummaryResult, TokenUsage
from ..errors import SummarizationAPIError
from .model_selector import compute_cost, model_for_tier, select_model
from .prompts import TOPIC_SLUGS, build_system_prompt, build_user_prompt
from .response_parser import parse_summary


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, SummarizationAPIError) and exc.is_rate_limit_or_server_error


class OpenAISummarizationClient:
    """Summarize one article into the bilingual story schema.

    Rate limits and server errors are retried twice in-call (1s, then 2s);
    everything else surfaces immediately so the item can be rescheduled.
    """

    def __init__(
        self,
        *,
        settings: Optional[LLMSettings] = None,
        api_key: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
        topic_slugs: Iterable[str] = TOPIC_SLUGS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings or LLMSettings()
        self._logger = logger or logging.getLogger(__name__)
        self._system_prompt = build_system_prompt(topic_slugs)
        if client is not None:
            self._client = client
            return
        try:
            api_key = check_config_override(api_key, "OPENAI_API_KEY", required=True)
        except ConfigurationError as e:
            raise ConfigurationError(f"{e}\nRequired for article summarization.")
        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=self._settings.timeout_seconds,
            max_retries=0,
        )

    async def summarize(
        self,
        *,
        title: str,
        content: str,
        language: str,
        reliability_score: float,
        source_name: str = "",
    ) -> SummaryResult:
        tier = select_model(reliability_score)
        model = model_for_tier(tier, self._settings)
        user_prompt = build_user_prompt(
            title=title,
            content=content,
            source_name=source_name,
            language=language,
            max_content_chars=self._settings.max_content_chars,
        )

        text, usage = await self._complete(model, user_prompt)
        summary = parse_summary(text)
        cost = compute_cost(tier, usage)
        self._logger.debug(
            "Summarized with %s (%s tier): %d in / %d out tokens, $%s",
            model,
            tier,
            usage.input_tokens,
            usage.output_tokens,
            cost,
        )
        return SummaryResult(summary=summary, model=model, tier=tier, usage=usage, cost_usd=cost)

    @retry(
        retry=retry_if_exception(_is_transient),
        wait=wait_exponential(multiplier=1, min=1, max=2),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    async def _complete(self, model: str, user_prompt: str) -> tuple[Optional[str], TokenUsage]:
        request = self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=self._settings.max_tokens,
            temperature=self._settings.temperature,
            response_format={"type": "json_object"},
        )
        try:
            response = await asyncio.wait_for(request, timeout=self._settings.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise SummarizationAPIError(
                f"Summarization timed out after {self._settings.timeout_seconds:.0f}s"
            ) from exc
        except APIStatusError as exc:
            self._logger.warning("OpenAI API error %s: %s", exc.status_code, exc.message)
            raise SummarizationAPIError(str(exc.message), status_code=exc.status_code) from exc
        except APIConnectionError as exc:
            raise SummarizationAPIError(f"Connection to OpenAI failed: {exc}") from exc

        usage = TokenUsage()
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens or 0,
                output_tokens=response.usage.completion_tokens or 0,
            )
        text = response.choices[0].message.content if response.choices else None
        return text, usage
