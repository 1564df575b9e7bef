"""Telegram Update JSON -> inbound port records."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, StrictInt, ValidationError

from pumpbridge.ports.inbound import IncomingCallback, IncomingText


class Chat(BaseModel):
    id: StrictInt


class User(BaseModel):
    id: Optional[StrictInt] = None
    username: Optional[str] = None
    first_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.username or self.first_name:
            return self.username or self.first_name
        return str(self.id) if self.id is not None else ""


class Message(BaseModel):
    chat: Optional[Chat] = None
    from_user: Optional[User] = Field(default=None, alias="from")
    text: Optional[str] = None


class CallbackQuery(BaseModel):
    id: str
    from_user: Optional[User] = Field(default=None, alias="from")
    data: Optional[str] = None
    message: Optional[Message] = None


class Update(BaseModel):
    update_id: Optional[StrictInt] = None
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None


def _author(user: Optional[User]) -> str:
    return user.display_name if user is not None else ""


def parse_update(payload: Any) -> Union[IncomingText, IncomingCallback, None]:
    """Extract a text message or callback query; anything else is None."""
    try:
        update = Update.model_validate(payload)
    except ValidationError:
        return None

    callback = update.callback_query
    if callback is not None:
        chat = callback.message.chat if callback.message is not None else None
        return IncomingCallback(
            callback_id=callback.id,
            author_name=_author(callback.from_user),
            data=callback.data or "",
            chat_id=chat.id if chat is not None else None,
        )

    message = update.message
    if message is not None:
        if message.chat is None or message.text is None:
            return None
        return IncomingText(
            chat_id=message.chat.id,
            author_name=_author(message.from_user),
            text=message.text,
        )

    return None
