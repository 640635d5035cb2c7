"""
Descriptors for the Ark AI gateway (chat completion, image generation).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..domain.ports import RequestDescriptor

# model calls routinely outlast the default dispatch timeout
AI_TIMEOUT_SECONDS = 60.0


def _join(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _bearer(api_key: str) -> Dict[str, Optional[str]]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


def text_part(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def image_part(url: str, detail: Optional[str] = None) -> Dict[str, Any]:
    image_url: Dict[str, Any] = {"url": url}
    if detail is not None:
        image_url["detail"] = detail
    return {"type": "image_url", "image_url": image_url}


def message(role: str, parts: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    return {"role": role, "content": [dict(p) for p in parts]}


@dataclass(frozen=True, slots=True)
class ChatCompletionRequest(RequestDescriptor):
    base_url: str
    api_key: str = field(repr=False)
    model: str
    messages: Sequence[Mapping[str, Any]]
    temperature: float = 0.7
    max_tokens: int = 2000
    top_p: float = 0.9
    stream: bool = False

    def api_url(self) -> str:
        return _join(self.base_url, "chat/completions")

    def http_headers(self) -> Mapping[str, Optional[str]]:
        return _bearer(self.api_key)

    def parameters(self) -> Mapping[str, Any]:
        messages: List[Dict[str, Any]] = [dict(m) for m in self.messages]
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
            "stream": self.stream,
        }

    def timeout_seconds(self) -> float:
        return AI_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class ImageGenerationRequest(RequestDescriptor):
    base_url: str
    api_key: str = field(repr=False)
    model: str
    prompt: str
    size: str = "720x1280"
    seed: Optional[int] = None
    guidance_scale: Optional[float] = 2.5
    watermark: Optional[bool] = False
    response_format: str = "url"

    def api_url(self) -> str:
        return _join(self.base_url, "images/generations")

    def http_headers(self) -> Mapping[str, Optional[str]]:
        return _bearer(self.api_key)

    def parameters(self) -> Mapping[str, Any]:
        params: Dict[str, Any] = {
            "model": self.model,
            "prompt": self.prompt,
            "response_format": self.response_format,
            "size": self.size,
            "seed": self.seed,
            "guidance_scale": self.guidance_scale,
            "watermark": self.watermark,
        }
        # unset optionals are left out of the body entirely
        return {k: v for k, v in params.items() if v is not None}

    def timeout_seconds(self) -> float:
        return AI_TIMEOUT_SECONDS
