# domain/errors.py
from __future__ import annotations


class MailgrabError(Exception):
    """Raíz de los errores propios de la librería."""


class NotConfiguredError(MailgrabError, RuntimeError):
    """El canal (SMTP o IMAP) no se configuró al crear la sesión."""


class NotFoundError(MailgrabError, LookupError):
    """Ningún correo sobrevive al filtro y el llamador exigía uno."""

    def __init__(self, message: str = "No email found") -> None:
        super().__init__(message)
