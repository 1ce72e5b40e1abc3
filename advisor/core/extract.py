from __future__ import annotations

from typing import Any, Callable, List, Tuple


FALLBACK_REPLY = "Sorry, I could not generate a reply."


def _from_output_text(data: Any) -> str:
    text = data.get("output_text") if isinstance(data, dict) else None
    return text if isinstance(text, str) else ""


def _from_content_blocks(data: Any) -> str:
    blocks = data.get("content") if isinstance(data, dict) else None
    if not isinstance(blocks, list):
        return ""
    texts = []
    for block in blocks:
        text = block.get("text") if isinstance(block, dict) else None
        if isinstance(text, str) and text:
            texts.append(text)
    return "\n".join(texts)


def _from_chat_choices(data: Any) -> str:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


def _from_output_blocks(data: Any) -> str:
    blocks = data.get("output") if isinstance(data, dict) else None
    if not isinstance(blocks, list):
        return ""
    texts: List[str] = []
    for block in blocks:
        parts = block.get("content") if isinstance(block, dict) else None
        if not isinstance(parts, list):
            continue
        for part in parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                texts.append(part["text"])
    return "\n".join(texts)


# Tried in order; the first non-empty string wins.
REPLY_EXTRACTORS: Tuple[Callable[[Any], str], ...] = (
    _from_output_text,
    _from_content_blocks,
    _from_chat_choices,
    _from_output_blocks,
)


def extract_reply(data: Any) -> str:
    """Pull plain reply text out of a completion response body.

    The upstream API has returned several shapes over time (Responses API
    ``output_text``, bare content blocks, chat-completions ``choices`` and
    the nested ``output`` list), so each is tried before giving up with
    ``FALLBACK_REPLY``.
    """
    for extractor in REPLY_EXTRACTORS:
        reply = extractor(data)
        if reply:
            return reply
    return FALLBACK_REPLY


def error_message(data: Any, default: str = "OpenAI request failed.") -> str:
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    if isinstance(data, str) and data.strip():
        return data.strip()
    return default
