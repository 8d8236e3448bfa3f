# domain/filters.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from mailgrab.domain.models import Message


@dataclass(frozen=True)
class FilterCriteria:
    """
    Criterios opcionales; None (o "" en los de texto) no restringe nada.

    date_from / date_until se aceptan pero todavía NO se evalúan.
    """
    from_addr: Optional[str] = None
    subject: Optional[str] = None
    has_attachment: Optional[bool] = None
    date_from: Optional[datetime] = None
    date_until: Optional[datetime] = None


def matches(criteria: FilterCriteria, message: Message) -> bool:
    if criteria.from_addr:
        sender = message.from_.text if message.from_ else None
        if sender != criteria.from_addr:
            return False

    if criteria.subject and message.subject != criteria.subject:
        return False

    if criteria.has_attachment is not None:
        if criteria.has_attachment != message.has_attachments:
            return False

    # TODO: aplicar date_from/date_until contra message.date
    return True


def filter_messages(criteria: FilterCriteria | None, messages: Iterable[Message]) -> list[Message]:
    """Mantiene el orden relativo de la entrada."""
    criteria = criteria or FilterCriteria()
    return [m for m in messages if matches(criteria, m)]
