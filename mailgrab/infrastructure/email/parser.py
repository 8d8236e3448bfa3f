# infrastructure/email/parser.py
# Bytes RFC822 -> dict con los campos de domain.models.Message
from __future__ import annotations
import html
import logging
import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any

import pyzmail
from pyzmail.parse import decode_mail_header

from mailgrab.domain.models import AddressObject, Attachment, HeaderLine

logger = logging.getLogger(__name__)

ADDRESS_HEADERS = {"from", "to", "cc", "bcc", "reply-to", "sender", "delivered-to"}
FOLDING = re.compile(r"\r?\n[ \t]+")


def _unfold(value: str) -> str:
    return FOLDING.sub(" ", value)


def _address_pairs(msg, key: str) -> list[tuple[str, str]]:
    # pyzmail repite la dirección como nombre cuando no hay display name
    return [("" if name == addr else name, addr) for name, addr in msg.get_addresses(key)]


def _decode_part(part) -> str:
    payload = part.get_payload()
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    return payload.decode(part.charset or "utf-8", errors="replace")


def _parse_date(value: str) -> datetime | str:
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.warning("Cabecera Date no válida: %r", value)
        return value


def _parse_references(value: str) -> str | list[str]:
    ids = value.split()
    return ids[0] if len(ids) == 1 else ids


def _priority(headers: dict[str, Any]) -> str:
    # X-Priority: 1 (Highest) .. 5 (Lowest)
    x_priority = str(headers.get("x-priority") or "").strip()
    if x_priority[:1] in ("1", "2"):
        return "high"
    if x_priority[:1] in ("4", "5"):
        return "low"
    for key in ("importance", "x-msmail-priority"):
        value = str(headers.get(key) or "").strip().lower()
        if value in ("high", "low"):
            return value
    return "normal"


def _text_as_html(text: str) -> str:
    paragraphs = [p for p in re.split(r"\n\s*\n", text.strip()) if p]
    return "".join("<p>%s</p>" % html.escape(p).replace("\n", "<br/>") for p in paragraphs)


def _collect_headers(msg) -> tuple[dict[str, Any], list[HeaderLine]]:
    headers: dict[str, Any] = {}
    lines: list[HeaderLine] = []

    for name, raw in msg.items():
        key = name.lower()
        raw = _unfold(str(raw))
        lines.append(HeaderLine(key=key, line=f"{name}: {raw}"))
        if key in ADDRESS_HEADERS:
            # get_addresses ya agrupa todas las apariciones de la cabecera
            if key not in headers:
                headers[key] = AddressObject.from_pairs(_address_pairs(msg, key))
            continue

        value: Any = decode_mail_header(raw)
        if key == "date":
            value = _parse_date(value)
        elif key == "references":
            value = _parse_references(value)

        if key in headers:
            prev = headers[key]
            headers[key] = (prev if isinstance(prev, list) else [prev]) + [value]
        else:
            headers[key] = value

    return headers, lines


def parse_mail(raw: bytes) -> dict[str, Any]:
    """Parsea el código fuente de un correo. Los errores de pyzmail se propagan."""
    msg = pyzmail.PyzMessage.factory(raw)
    headers, header_lines = _collect_headers(msg)

    text = _decode_part(msg.text_part) if msg.text_part is not None else None
    html_body = _decode_part(msg.html_part) if msg.html_part is not None else None

    attachments: list[Attachment] = []
    for part in msg.mailparts:
        if part.is_body:
            continue
        payload = part.get_payload()
        if isinstance(payload, bytes):
            attachments.append(
                Attachment(
                    filename=part.filename,
                    content_type=part.type or "application/octet-stream",
                    content=payload,
                    content_id=part.content_id,
                    disposition=part.disposition,
                    charset=part.charset,
                )
            )

    date = headers.get("date")
    subject = headers.get("subject")
    if isinstance(subject, list):
        subject = subject[0]
    return {
        "attachments": attachments,
        "headers": headers,
        "header_lines": header_lines,
        "html": html_body,
        "text": text,
        "text_as_html": _text_as_html(text) if text else None,
        "subject": subject or None,
        "references": headers.get("references"),
        "date": date if isinstance(date, datetime) else None,
        "to": headers.get("to"),
        "from_": headers.get("from"),
        "cc": headers.get("cc"),
        "bcc": headers.get("bcc"),
        "reply_to": headers.get("reply-to"),
        "message_id": headers.get("message-id"),
        "in_reply_to": headers.get("in-reply-to"),
        "priority": _priority(headers),
    }
