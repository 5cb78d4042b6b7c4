# -*- coding: utf-8 -*-
"""Gateway — one-shot generative model calls (instruction + inline images -> JSON)."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import settings
from ..errors import AIGatewayFailure
from .parsing import parse_model_json

log = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class GatewaySettings:
    base_url: str
    model: str
    api_key: Optional[str]
    timeout: float
    temperature: float


def resolve_gateway_settings() -> GatewaySettings:
    return GatewaySettings(
        base_url=settings.gemini_base_url.rstrip("/"),
        model=settings.gemini_model,
        api_key=settings.gemini_api_key,
        timeout=settings.gemini_timeout,
        temperature=settings.gemini_temperature,
    )


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime: str


@dataclass
class GatewayResult:
    """Outcome of one gateway call: either a value or an error message."""

    value: Any = None
    error: Optional[str] = None
    raw_text: str = ""
    model: str = ""
    dropped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise AIGatewayFailure(self.error)
        return self.value

    def unwrap_or(self, default: Any) -> Any:
        return self.value if self.error is None else default


def _extract_text(data: object) -> str:
    """Concatenate the text parts of the first candidate of a generateContent reply."""
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0]
    if not isinstance(first, dict):
        return ""
    content = first.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    out: list[str] = []
    for part in parts:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            out.append(part["text"])
    return "".join(out)


def _extract_error(data: object) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    err = data.get("error")
    if isinstance(err, dict):
        status = err.get("status") or err.get("code") or "error"
        message = err.get("message") or "unknown error"
        return f"{status}: {message}"
    feedback = data.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        return f"Prompt blocked: {feedback['blockReason']}"
    return None


class GeminiGateway:
    """Thin client for the ``models/{model}:generateContent`` endpoint.

    No streaming, no retries. Every failure (transport, HTTP status, empty or
    unparseable reply, schema mismatch) comes back as a failed ``GatewayResult``.
    """

    def __init__(
        self,
        config: GatewaySettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or resolve_gateway_settings()
        self._transport = transport

    def _payload(self, prompt: str, images: Sequence[ImagePart]) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = [{"text": prompt}]
        for image in images:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": image.mime,
                        "data": base64.b64encode(image.data).decode("ascii"),
                    }
                }
            )
        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"temperature": self.config.temperature},
        }

    def _call(self, prompt: str, images: Sequence[ImagePart]) -> str:
        cfg = self.config
        if not cfg.api_key:
            raise RuntimeError("GEMINI_API_KEY not set")
        url = f"{cfg.base_url}/models/{cfg.model}:generateContent"
        headers = {"Content-Type": "application/json", "x-goog-api-key": cfg.api_key}
        with httpx.Client(timeout=cfg.timeout, transport=self._transport) as client:
            resp = client.post(url, headers=headers, json=self._payload(prompt, images))
            try:
                data = resp.json()
            except ValueError:
                data = None
            if resp.status_code >= 400:
                detail = _extract_error(data) or f"HTTP {resp.status_code}"
                raise RuntimeError(f"Model call failed: {detail}")
        error = _extract_error(data)
        if error:
            raise RuntimeError(error)
        return _extract_text(data)

    def generate(self, prompt: str, images: Sequence[ImagePart] = ()) -> GatewayResult:
        model = self.config.model
        try:
            text = self._call(prompt, images)
        except Exception as exc:
            log.warning("model call failed: %s", exc)
            return GatewayResult(error=str(exc), model=model)

        try:
            value = parse_model_json(text)
        except ValueError as exc:
            log.warning("model output parse failed: %s; raw=%r", exc, (text or "")[:300])
            return GatewayResult(error=str(exc), raw_text=text or "", model=model)
        return GatewayResult(value=value, raw_text=text, model=model)

    def generate_validated(
        self,
        prompt: str,
        adapter: TypeAdapter,
        images: Sequence[ImagePart] = (),
        *,
        many: bool = False,
    ) -> GatewayResult:
        """Generate, then validate the parsed JSON against ``adapter``.

        With ``many`` the reply must be a JSON array of ``adapter`` items; elements failing
        validation are dropped (and reported in ``dropped``) and the call fails
        only if nothing valid remains out of a non-empty reply.
        """
        result = self.generate(prompt, images)
        if not result.ok:
            return result

        if not many:
            try:
                result.value = adapter.validate_python(result.value)
            except ValidationError as exc:
                log.warning("model output did not match schema: %s", exc)
                return GatewayResult(error=f"Model output did not match schema: {exc.error_count()} errors",
                                     raw_text=result.raw_text, model=result.model)
            return result

        raw_items = result.value
        if isinstance(raw_items, dict):
            # Tolerate {"items": [...]}-style wrappers.
            raw_items = next((v for v in raw_items.values() if isinstance(v, list)), _MISSING)
        if not isinstance(raw_items, list):
            return GatewayResult(error="Model output is not a JSON array", raw_text=result.raw_text, model=result.model)

        valid: list[Any] = []
        dropped: list[str] = []
        for raw in raw_items:
            try:
                valid.append(adapter.validate_python(raw))
            except ValidationError as exc:
                dropped.append(f"{exc.error_count()} errors in {str(raw)[:80]}")
        if dropped:
            log.warning("dropped %d malformed items from model output", len(dropped))
        if raw_items and not valid:
            return GatewayResult(error="Model output contained no valid items", raw_text=result.raw_text,
                                 model=result.model, dropped=dropped)
        return GatewayResult(value=valid, raw_text=result.raw_text, model=result.model, dropped=dropped)


_gateway: GeminiGateway | None = None


def get_gateway() -> GeminiGateway:
    global _gateway
    if _gateway is None:
        _gateway = GeminiGateway()
    return _gateway


def set_gateway(gateway: GeminiGateway | None) -> None:
    global _gateway
    _gateway = gateway
