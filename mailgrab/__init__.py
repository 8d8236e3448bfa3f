"""Leer el último correo de un buzón IMAP y extraer datos de su HTML."""

__version__ = "0.1.0"

import logging

from mailgrab.application.services.account_factory import (
    create_account,
    create_account_from_env,
    create_random_account,
)
from mailgrab.application.services.mailbox_session import MailboxSession
from mailgrab.application.use_cases.last_mail import (
    MailData,
    account_last_mail,
    account_last_mail_and_data,
    account_last_mail_data,
    get_data_by_mail,
    last_mail,
    last_mail_and_data,
    last_mail_data,
)
from mailgrab.config.settings import Settings
from mailgrab.domain.errors import MailgrabError, NotConfiguredError, NotFoundError
from mailgrab.domain.filters import FilterCriteria, filter_messages, matches
from mailgrab.domain.models import AccountConfig, Address, AddressObject, Attachment, Message, ServerConfig
from mailgrab.infrastructure.email.smtp_client import MailOptions, SendResult, compose_message

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AccountConfig",
    "Address",
    "AddressObject",
    "Attachment",
    "FilterCriteria",
    "MailData",
    "MailOptions",
    "MailboxSession",
    "MailgrabError",
    "Message",
    "NotConfiguredError",
    "NotFoundError",
    "SendResult",
    "ServerConfig",
    "Settings",
    "account_last_mail",
    "account_last_mail_and_data",
    "account_last_mail_data",
    "compose_message",
    "create_account",
    "create_account_from_env",
    "create_random_account",
    "filter_messages",
    "get_data_by_mail",
    "last_mail",
    "last_mail_and_data",
    "last_mail_data",
    "matches",
]
