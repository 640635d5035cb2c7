from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ...domain.entities import ChatMessage
from ...domain.exceptions import DecodingError, NoDataError
from ...domain.ports import Dispatcher
from ...endpoints.ark import ChatCompletionRequest, image_part, message, text_part

# placeholder bubble the UI shows while a reply is pending
LOADING_MESSAGE_ID = "loading"

CONVERSATION_OPENER = "请开始我们的对话。"


def history_to_messages(history: Iterable[ChatMessage]) -> List[Dict[str, Any]]:
    return [
        message(item.role, [text_part(item.content)])
        for item in history
        if item.id != LOADING_MESSAGE_ID
    ]


def first_choice_content(payload: Any) -> str:
    """
    Pull the reply text out of a chat completion payload.

    Raises:
        NoDataError when the completion has no choices
        KeyError / TypeError when the payload has the wrong shape
    """
    if not isinstance(payload, Mapping):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    choices = payload["choices"]
    if not isinstance(choices, list):
        raise TypeError("'choices' must be a list")
    if not choices:
        raise NoDataError("AI returned no response")
    content = choices[0]["message"]["content"]
    if not isinstance(content, str):
        raise TypeError("message content must be a string")
    return content


@dataclass(slots=True)
class ChatCompletionUseCase:
    """
    Application use case: turn a conversation into a chat completion call
    and return the assistant's reply text.
    """

    dispatcher: Dispatcher
    base_url: str
    api_key: str
    model: str

    async def send_message(
        self,
        text: str,
        *,
        image_url: Optional[str] = None,
        system_message: Optional[str] = None,
        history: Iterable[ChatMessage] = (),
    ) -> str:
        messages: List[Dict[str, Any]] = []
        if system_message is not None:
            messages.append(message("system", [text_part(system_message)]))
        messages.extend(history_to_messages(history))

        parts = [text_part(text)]
        if image_url is not None:
            parts.append(image_part(image_url))
        messages.append(message("user", parts))

        return await self._complete(messages)

    async def initiate_conversation(self, system_message: Optional[str] = None) -> str:
        """Have the assistant speak first."""
        messages: List[Dict[str, Any]] = []
        if system_message is not None:
            messages.append(message("system", [text_part(system_message)]))
        messages.append(message("user", [text_part(CONVERSATION_OPENER)]))
        return await self._complete(messages)

    async def _complete(self, messages: List[Dict[str, Any]]) -> str:
        descriptor = ChatCompletionRequest(
            base_url=self.base_url,
            api_key=self.api_key,
            model=self.model,
            messages=messages,
        )
        outcome = await self.dispatcher.dispatch(descriptor)
        try:
            return first_choice_content(outcome.unwrap())
        except (KeyError, IndexError, TypeError) as exc:
            raise DecodingError(exc) from exc
