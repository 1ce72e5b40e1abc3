from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field


class CompletionError(RuntimeError):
    """Raised when the completion endpoint could not be reached at all."""


class CompletionInput(BaseModel):
    model: str = Field(..., description="Model identifier")
    input: str = Field(..., description="Fully assembled prompt")
    temperature: float = Field(..., description="Sampling temperature")


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        # Error pages are often plain text; a success must be JSON
        if response.is_success:
            raise CompletionError(
                f"Completion API returned a non-JSON body (status={response.status_code})"
            ) from exc
        return response.text


def call_completion(
    endpoint: str,
    api_key: str,
    payload: CompletionInput,
    transport: Optional[httpx.BaseTransport] = None,
) -> Dict[str, Any]:
    """POST one prompt to the completion endpoint.

    Non-success statuses are returned, not raised, so the caller can surface
    the upstream error message. No timeout and no retry.
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    try:
        with httpx.Client(timeout=None, transport=transport) as client:
            response = client.post(endpoint, json=payload.model_dump(), headers=headers)
            data = _decode_body(response)
    except httpx.HTTPError as exc:
        raise CompletionError(f"Completion API call failed: {exc}") from exc

    return {
        "ok": response.is_success,
        "status_code": response.status_code,
        "data": data,
    }
