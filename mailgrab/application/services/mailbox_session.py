# application/services/mailbox_session.py
from __future__ import annotations
import logging
from email.message import Message as MIMEMessage

from mailgrab.domain.errors import NotConfiguredError
from mailgrab.domain.filters import FilterCriteria, filter_messages
from mailgrab.domain.models import AccountConfig, Message
from mailgrab.infrastructure.email.imap_client import IMAPInbox
from mailgrab.infrastructure.email.parser import parse_mail
from mailgrab.infrastructure.email.smtp_client import MailOptions, SendResult, SMTPOutbox

logger = logging.getLogger(__name__)


class MailboxSession:
    """
    Canal de envío (SMTP) y de lectura (IMAP) de una cuenta.

    Los handles se crean al construir la sesión, sin tocar la red; un canal
    no configurado solo falla al usarse. No llamar a get_all_mails/get_last_mail
    en paralelo sobre la misma sesión: el handle IMAP es único y cada llamada
    hace su propio login/logout.
    """

    def __init__(
        self,
        config: AccountConfig,
        *,
        folder: str = "INBOX",
        fetch_batch: int = 100,
        smtp_timeout: float = 30,
        log: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.folder = folder
        self.log = log or logger
        self.outbox: SMTPOutbox | None = None
        self.inbox: IMAPInbox | None = None

        if config.smtp is not None:
            self.outbox = SMTPOutbox(
                config.smtp.host,
                config.smtp.port,
                config.username,
                config.password,
                secure=config.smtp.secure,
                timeout=smtp_timeout,
            )

        if config.imap is not None:
            self.inbox = IMAPInbox(
                config.imap.host,
                config.imap.port,
                config.username,
                config.password,
                ssl=config.imap.secure,
                fetch_batch=fetch_batch,
            )

    @property
    def username(self) -> str:
        return self.config.username

    @property
    def password(self) -> str:
        return self.config.password

    # ───────── lectura ─────────
    def _fetch_sources(self) -> list[bytes]:
        if self.inbox is None:
            raise NotConfiguredError("Imap client is not configured")

        with self.inbox as inbox:
            inbox.select_folder(self.folder)
            uids = inbox.search_all()
            uids.reverse()  # más reciente primero
            self.log.info("IMAP %s: %d correos en %s", self.username, len(uids), self.folder)
            fetched = inbox.fetch_mails(uids) if uids else []

        return [f.source for f in fetched]

    def get_all_mails(self, criteria: FilterCriteria | None = None) -> list[Message]:
        """Todos los correos de la carpeta que pasan el filtro, del más reciente al más antiguo."""
        sources = self._fetch_sources()
        mails = [Message.from_parsed(parse_mail(src)) for src in sources]
        return filter_messages(criteria, mails)

    def get_last_mail(self, criteria: FilterCriteria | None = None) -> Message | None:
        """None si ningún correo pasa el filtro (no lanza NotFoundError)."""
        mails = self.get_all_mails(criteria)
        return mails[0] if mails else None

    # ───────── envío ─────────
    def send_mail(self, mail: MailOptions | MIMEMessage) -> SendResult:
        if self.outbox is None:
            raise NotConfiguredError("SMTP server is not configured")
        return self.outbox.send(mail)
