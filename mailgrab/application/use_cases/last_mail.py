# application/use_cases/last_mail.py
# "Último correo que cumple X y un dato de su HTML" en una sola llamada
from __future__ import annotations
from typing import NamedTuple, Optional

from mailgrab.application.services.account_factory import create_account
from mailgrab.application.services.mailbox_session import MailboxSession
from mailgrab.domain.errors import NotFoundError
from mailgrab.domain.filters import FilterCriteria
from mailgrab.domain.models import AccountConfig, Message


class MailData(NamedTuple):
    message: Message
    data: str


def get_data_by_mail(message: Message, selector: str) -> str:
    return message.get_data(selector)


# ───────── a partir de la configuración (solo IMAP) ─────────
def last_mail(config: AccountConfig, criteria: FilterCriteria | None = None) -> Optional[Message]:
    session = create_account(config.without_smtp())
    return session.get_last_mail(criteria)


def last_mail_and_data(config: AccountConfig, criteria: FilterCriteria | None, selector: str) -> MailData:
    """Lanza NotFoundError("No email found") si ningún correo pasa el filtro."""
    message = last_mail(config, criteria)
    if message is None:
        raise NotFoundError()
    return MailData(message=message, data=get_data_by_mail(message, selector))


def last_mail_data(config: AccountConfig, criteria: FilterCriteria | None, selector: str) -> str:
    return last_mail_and_data(config, criteria, selector).data


# ───────── a partir de una sesión existente ─────────
# Estas variantes no lanzan NotFoundError: sin correo, la extracción falla
# con el AttributeError de acceder a None.
def account_last_mail(session: MailboxSession, criteria: FilterCriteria | None = None) -> Optional[Message]:
    return session.get_last_mail(criteria)


def account_last_mail_data(session: MailboxSession, criteria: FilterCriteria | None, selector: str) -> str:
    message = account_last_mail(session, criteria)
    return get_data_by_mail(message, selector)  # type: ignore[arg-type]


def account_last_mail_and_data(session: MailboxSession, criteria: FilterCriteria | None, selector: str) -> MailData:
    message = account_last_mail(session, criteria)
    return MailData(message=message, data=get_data_by_mail(message, selector))  # type: ignore[arg-type]
