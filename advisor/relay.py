from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import httpx
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, get_buffer_string

from advisor.core.extract import error_message, extract_reply
from advisor.core.models import AdvisorReply, ChatTurn, CourseRecord
from advisor.core.prompt import CONTEXT_HEADING, SYSTEM_PROMPT
from advisor.tools.completion import CompletionInput, call_completion
from config.settings import Settings, get_settings


logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10
ERROR_PREFIX = "Advisor error: "


def to_lc_messages(history: Sequence[ChatTurn]) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for turn in list(history or [])[-HISTORY_LIMIT:]:
        role = (turn.role or "").lower()
        if role in ("assistant", "ai", "bot"):
            messages.append(AIMessage(content=turn.content))
        else:
            # Unknown roles are rendered as the user
            messages.append(HumanMessage(content=turn.content))
    return messages


def _render(message: BaseMessage) -> str:
    return get_buffer_string([message], human_prefix="User", ai_prefix="Assistant")


def summarize_checked(checked: Optional[Sequence[CourseRecord]]) -> str:
    if not checked:
        return ""

    by_category: Dict[str, List[str]] = {}
    for course in checked:
        category = (course.category or "other").lower()
        code = course.code.strip()
        name = course.name.strip()
        units = course.units.strip()
        line = code
        if name:
            line += f" - {name}"
        if units:
            line += f" ({units}u)"
        by_category.setdefault(category, []).append(line)

    parts = []
    for category, lines in by_category.items():
        parts.append(f"- {category}:")
        parts.extend(f"  • {line}" for line in lines)
    return CONTEXT_HEADING + "\n" + "\n".join(parts)


def build_prompt(
    system_prompt: str,
    history: Sequence[ChatTurn],
    user_message: str,
    context: str = "",
) -> str:
    sections = [_render(SystemMessage(content=system_prompt))]
    if context and context.strip():
        sections.append(f"Context:\n{context}")
    sections.extend(_render(message) for message in to_lc_messages(history))
    sections.append(_render(HumanMessage(content=user_message)))
    return "\n\n".join(sections)


class AdvisorRelay:
    """Turns one chat request into one completion call and a plain reply.

    Never raises: every failure becomes an ``Advisor error: ...`` reply.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        temperature: float = 0.6,
        api_url: str = "https://api.openai.com/v1/responses",
        system_prompt: str = SYSTEM_PROMPT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.api_url = api_url
        self.system_prompt = system_prompt
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AdvisorRelay":
        settings = settings or get_settings()
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.temperature,
            api_url=settings.openai_api_url,
        )

    def relay(
        self,
        message: Optional[str],
        history: Optional[Sequence[ChatTurn]] = None,
        checked: Optional[Sequence[CourseRecord]] = None,
    ) -> AdvisorReply:
        if not message or not isinstance(message, str):
            return AdvisorReply(reply=ERROR_PREFIX + "message is required.")
        if not self.api_key:
            return AdvisorReply(reply=ERROR_PREFIX + "missing API key on server.")

        try:
            context = summarize_checked(checked)
            logger.info("AI context - checked courses: %s", len(checked or []))
            prompt = build_prompt(self.system_prompt, history or [], message, context)
            payload = CompletionInput(model=self.model, input=prompt, temperature=self.temperature)
            result = call_completion(self.api_url, self.api_key, payload, transport=self._transport)
        except Exception:
            # CompletionError or anything else; the caller still gets a reply
            logger.exception("Proxy error")
            return AdvisorReply(reply=ERROR_PREFIX + "unable to reach OpenAI.")

        if not result["ok"]:
            logger.error("OpenAI error (status=%s): %s", result["status_code"], result["data"])
            return AdvisorReply(reply=ERROR_PREFIX + error_message(result["data"]))

        return AdvisorReply(reply=extract_reply(result["data"]))
