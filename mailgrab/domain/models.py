# domain/models.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from email.utils import formataddr
from typing import Any, Literal, Mapping, Optional

from mailgrab.infrastructure.email.html_query import select_text

logger = logging.getLogger(__name__)

Priority = Literal["normal", "low", "high"]


# ───────── configuración de cuenta ─────────
@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    secure: bool = True


@dataclass(frozen=True)
class AccountConfig:
    """
    Credenciales compartidas + un ServerConfig opcional por canal.
    smtp=None / imap=None significa canal deshabilitado; no se valida aquí,
    el canal ausente falla al usarse.
    """
    username: str
    password: str
    smtp: Optional[ServerConfig] = None
    imap: Optional[ServerConfig] = None

    @classmethod
    def from_params(
        cls,
        *,
        username: str,
        password: str,
        smtp_host: str | None = None,
        smtp_port: int | None = None,
        smtp_secure: bool = True,
        imap_host: str | None = None,
        imap_port: int | None = None,
        imap_secure: bool = True,
    ) -> "AccountConfig":
        """Parámetros planos: host vacío o puerto 0/None deshabilita el canal."""
        smtp = ServerConfig(smtp_host, int(smtp_port), smtp_secure) if smtp_host and smtp_port else None
        imap = ServerConfig(imap_host, int(imap_port), imap_secure) if imap_host and imap_port else None
        return cls(username=username, password=password, smtp=smtp, imap=imap)

    def without_smtp(self) -> "AccountConfig":
        return replace(self, smtp=None)


# ───────── correo parseado ─────────
@dataclass(frozen=True)
class Address:
    name: str
    address: str

    def __str__(self) -> str:
        return formataddr((self.name, self.address)) if self.name else self.address


@dataclass(frozen=True)
class AddressObject:
    value: list[Address]
    text: str

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> "AddressObject":
        value = [Address(name=name or "", address=addr or "") for name, addr in pairs]
        return cls(value=value, text=", ".join(str(a) for a in value))


@dataclass(frozen=True)
class Attachment:
    filename: Optional[str]
    content_type: str
    content: bytes
    content_id: Optional[str] = None
    disposition: Optional[str] = None
    charset: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class HeaderLine:
    key: str
    line: str


@dataclass(frozen=True)
class Message:
    """
    Instantánea inmutable de un correo parseado.

    - headers: claves en minúscula; cabeceras de dirección como AddressObject,
      `date` como datetime, cabeceras repetidas como lista.
    - html: None cuando el correo no trae parte HTML ("" es un HTML vacío).
    - attachments: siempre una lista, posiblemente vacía.
    """
    attachments: list[Attachment] = field(default_factory=list)
    headers: dict[str, Any] = field(default_factory=dict)
    header_lines: list[HeaderLine] = field(default_factory=list)
    html: Optional[str] = None
    text: Optional[str] = None
    text_as_html: Optional[str] = None
    subject: Optional[str] = None
    references: str | list[str] | None = None
    date: Optional[datetime] = None
    to: Optional[AddressObject] = None
    from_: Optional[AddressObject] = None
    cc: Optional[AddressObject] = None
    bcc: Optional[AddressObject] = None
    reply_to: Optional[AddressObject] = None
    message_id: Optional[str] = None
    in_reply_to: Optional[str] = None
    priority: Priority = "normal"

    @classmethod
    def from_parsed(cls, parsed: Mapping[str, Any]) -> "Message":
        """Copia campo a campo el resultado del parser (sin transformar valores)."""
        values = {f.name: parsed[f.name] for f in fields(cls) if f.name in parsed}
        if values.get("attachments") is None:
            values["attachments"] = []
        return cls(**values)

    @property
    def has_attachments(self) -> bool:
        return len(self.attachments) > 0

    def get_data(self, selector: str, log: logging.Logger | None = None) -> str:
        """Texto de los nodos del HTML que casan con el selector CSS; "" si no hay HTML."""
        if self.html is None:
            (log or logger).error("HTML content is not available (message_id=%s)", self.message_id)
            return ""
        return select_text(self.html, selector.strip())
