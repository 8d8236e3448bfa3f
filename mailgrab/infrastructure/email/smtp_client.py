# infrastructure/email/smtp_client.py
from __future__ import annotations
import logging
import smtplib
from dataclasses import dataclass, field
from email.message import Message as MIMEMessage
from email.utils import getaddresses
from typing import Iterable, Tuple

import pyzmail

logger = logging.getLogger(__name__)

AttachmentSpec = Tuple[str, bytes, str]  # (filename, content, content_type)


@dataclass
class MailOptions:
    sender: str | tuple[str, str]
    to: list[str | tuple[str, str]]
    subject: str = ""
    text: str | None = None
    html: str | None = None
    cc: list[str | tuple[str, str]] = field(default_factory=list)
    bcc: list[str | tuple[str, str]] = field(default_factory=list)
    attachments: list[AttachmentSpec] = field(default_factory=list)
    headers: list[tuple[str, str]] = field(default_factory=list)
    charset: str = "utf-8"


@dataclass
class SendResult:
    message_id: str | None
    accepted: list[str]
    rejected: dict[str, tuple[int, bytes]]


def _pyzmail_attachments(attachments: Iterable[AttachmentSpec], charset: str) -> list[tuple]:
    out = []
    for filename, content, ctype in attachments:
        maintype, _, subtype = (ctype or "application/octet-stream").partition("/")
        if maintype == "text":
            out.append((content.decode(charset, errors="replace"), maintype, subtype, filename, charset))
        else:
            out.append((content, maintype, subtype, filename, None))
    return out


def compose_message(options: MailOptions) -> tuple[str, str, list[str], str]:
    """Devuelve (payload, mail_from, rcpt_to, message_id) listo para SMTP."""
    return pyzmail.compose_mail(
        options.sender,
        options.to,
        options.subject,
        options.charset,
        (options.text or "", options.charset) if options.text is not None or options.html is None else None,
        html=(options.html, options.charset) if options.html is not None else None,
        attachments=_pyzmail_attachments(options.attachments, options.charset),
        cc=options.cc,
        bcc=options.bcc,
        message_id_string="mailgrab",
        headers=options.headers,
    )


class SMTPOutbox:
    """Handle SMTP; abre una conexión por envío. secure=True -> TLS implícito (SMTPS)."""

    def __init__(self, host: str, port: int, user: str, password: str, secure: bool = True, timeout: float = 30) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.secure = secure
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        smtp.ehlo()
        if smtp.has_extn("starttls"):
            smtp.starttls()
            smtp.ehlo()
        return smtp

    def send(self, mail: MailOptions | MIMEMessage) -> SendResult:
        if isinstance(mail, MailOptions):
            payload, mail_from, rcpt_to, message_id = compose_message(mail)
        else:
            payload = None
            headers = mail.get_all("To", []) + mail.get_all("Cc", []) + mail.get_all("Bcc", [])
            rcpt_to = [addr for _, addr in getaddresses(headers) if addr]
            message_id = mail.get("Message-ID")

        logger.info("Enviando correo vía SMTP %s:%s a %s", self.host, self.port, rcpt_to)
        with self._connect() as smtp:
            smtp.login(self.user, self.password)
            if payload is None:
                # send_message quita Bcc de la cabecera
                rejected = smtp.send_message(mail)
            else:
                rejected = smtp.sendmail(mail_from, rcpt_to, payload)

        if rejected:
            logger.warning("Destinatarios rechazados: %s", list(rejected))
        accepted = [r for r in rcpt_to if r not in rejected]
        return SendResult(message_id=message_id, accepted=accepted, rejected=dict(rejected))
