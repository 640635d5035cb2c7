from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ...domain.exceptions import DecodingError, NoDataError
from ...domain.ports import Dispatcher
from ...endpoints.ark import ImageGenerationRequest

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImageGenerationUseCase:
    """
    Application use case: generate one image from a prompt and return
    its URL.
    """

    dispatcher: Dispatcher
    base_url: str
    api_key: str
    model: str

    async def generate_image(
        self,
        prompt: str,
        *,
        size: str = "720x1280",
        seed: Optional[int] = None,
        guidance_scale: float = 2.5,
        watermark: bool = False,
    ) -> str:
        """
        Raises:
            SoulNetError subclasses from the dispatch
            DecodingError when the payload is not an image generation result
            NoDataError when no image URL came back
        """
        descriptor = ImageGenerationRequest(
            base_url=self.base_url,
            api_key=self.api_key,
            model=self.model,
            prompt=prompt,
            size=size,
            seed=seed,
            guidance_scale=guidance_scale,
            watermark=watermark,
        )
        outcome = await self.dispatcher.dispatch(descriptor)
        payload = outcome.unwrap()

        if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), list):
            raise DecodingError(TypeError("image response has no 'data' list"))

        self._log_usage(payload.get("usage"))

        images = payload["data"]
        url = images[0].get("url") if images and isinstance(images[0], Mapping) else None
        if not isinstance(url, str) or not url:
            raise NoDataError("No image URL returned")
        return url

    @staticmethod
    def _log_usage(usage: Any) -> None:
        if not isinstance(usage, Mapping):
            return
        logger.info(
            "image generation usage: images=%s output_tokens=%s total_tokens=%s",
            usage.get("generated_images"),
            usage.get("output_tokens", 0),
            usage.get("total_tokens", 0),
        )
