"""Repository interfaces and the in-memory message repository."""
from __future__ import annotations

from typing import Iterator, Protocol, Sequence

from .messages import JoinKey, Message, MessageKind, TRANSACTIONAL_KINDS


class MessageSource(Protocol):
    """Provides messages decoded from one uploaded document."""

    def list_messages(self) -> Sequence[Message]:
        ...


class MessageRepository:
    """Decoded messages of one processing run.

    Seller agreements are unique per join key and the latest registration
    wins. Transactional messages keep their arrival order per kind.
    """

    def __init__(self) -> None:
        self._sellers: dict[JoinKey, Message] = {}
        self._transactional: dict[MessageKind, list[Message]] = {kind: [] for kind in TRANSACTIONAL_KINDS}

    def register(self, message: Message) -> None:
        if message.kind is MessageKind.SELLER_AGREEMENT:
            self._sellers[message.join_key()] = message
        else:
            self._transactional[message.kind].append(message)

    def lookup_seller(self, sender_code: str | None, seller_nr: str | None) -> Message | None:
        return self._sellers.get((sender_code or "", seller_nr or ""))

    def all(self, kind: MessageKind) -> Sequence[Message]:
        if kind is MessageKind.SELLER_AGREEMENT:
            return tuple(self._sellers.values())
        return tuple(self._transactional[kind])

    def transactional(self) -> Iterator[Message]:
        for kind in TRANSACTIONAL_KINDS:
            yield from self._transactional[kind]

    def clear(self) -> None:
        self._sellers.clear()
        for messages in self._transactional.values():
            messages.clear()

    def __len__(self) -> int:
        return len(self._sellers) + sum(len(messages) for messages in self._transactional.values())
