from __future__ import annotations

from email.message import EmailMessage
from typing import Iterable

from mailgrab.domain.models import AddressObject, Attachment, Message


def make_raw_email(
    *,
    subject: str = "Your code",
    sender: str = "Ethereal <no-reply@example.test>",
    to: str = "user@example.test",
    text: str | None = "Your verification code is 123456",
    html: str | None = '<html><body><div class="code">123456</div></body></html>',
    attachments: Iterable[tuple[str, bytes, str]] = (),
    message_id: str = "<msg-1@example.test>",
    extra_headers: Iterable[tuple[str, str]] = (),
) -> bytes:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to
    msg["Date"] = "Mon, 01 Jan 2024 12:00:00 +0000"
    msg["Message-ID"] = message_id
    for name, value in extra_headers:
        msg[name] = value
    if text is not None:
        msg.set_content(text)
    if html is not None:
        if text is not None:
            msg.add_alternative(html, subtype="html")
        else:
            msg.set_content(html, subtype="html")
    for filename, content, ctype in attachments:
        maintype, subtype = ctype.split("/")
        msg.add_attachment(content, maintype=maintype, subtype=subtype, filename=filename)
    return msg.as_bytes()


def make_message(
    *,
    sender: str | None = "no-reply@example.test",
    subject: str | None = "Your code",
    attachments: list[Attachment] | None = None,
    html: str | None = '<div class="code">123456</div>',
) -> Message:
    return Message(
        attachments=attachments or [],
        subject=subject,
        html=html,
        from_=AddressObject.from_pairs([("", sender)]) if sender else None,
    )


def make_attachment(filename: str = "report.pdf") -> Attachment:
    return Attachment(filename=filename, content_type="application/pdf", content=b"%PDF-1.4")


class FakeIMAPClient:
    """imapclient.IMAPClient en memoria; `mailbox` es {uid: fuente}."""

    mailbox: dict[int, bytes] = {}
    fail_on: str | None = None
    instances: list["FakeIMAPClient"] = []

    def __init__(self, host: str, port: int | None = None, ssl: bool = True, **kwargs) -> None:
        self.host = host
        self.port = port
        self.ssl = ssl
        self.calls: list[str] = []
        self.fetch_requests: list[list[int]] = []
        self.selected: tuple[str, bool] | None = None
        FakeIMAPClient.instances.append(self)

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if FakeIMAPClient.fail_on == name:
            raise RuntimeError(f"{name} failed")

    def login(self, user: str, password: str) -> None:
        self._record("login")

    def select_folder(self, folder: str, readonly: bool = False) -> None:
        self._record("select_folder")
        self.selected = (folder, readonly)

    def search(self, criteria) -> list[int]:
        self._record("search")
        return sorted(FakeIMAPClient.mailbox)

    def fetch(self, uids, items) -> dict:
        self._record("fetch")
        self.fetch_requests.append(list(uids))
        # el servidor responde en orden inverso al pedido
        return {
            uid: {b"ENVELOPE": None, b"BODYSTRUCTURE": None, b"BODY[]": FakeIMAPClient.mailbox[uid]}
            for uid in reversed(list(uids))
        }

    def logout(self) -> None:
        self._record("logout")

    def shutdown(self) -> None:
        self.calls.append("shutdown")
