# config/settings.py
from __future__ import annotations
from dataclasses import dataclass
import os
from dotenv import load_dotenv

from mailgrab.domain.models import AccountConfig

load_dotenv()

@dataclass(frozen=True)
class Settings:
    # SMTP (host vacío o puerto 0 = envío deshabilitado)
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", 0))
    SMTP_SECURE: bool = os.getenv("SMTP_SECURE", "true").lower() == "true"
    SMTP_TIMEOUT: int = int(os.getenv("SMTP_TIMEOUT", 30))

    # IMAP
    IMAP_HOST: str = os.getenv("IMAP_HOST", "")
    IMAP_PORT: int = int(os.getenv("IMAP_PORT", 0))
    IMAP_SECURE: bool = os.getenv("IMAP_SECURE", "true").lower() == "true"
    IMAP_FOLDER_INBOX: str = os.getenv("IMAP_FOLDER_INBOX", "INBOX")
    IMAP_FETCH_BATCH: int = int(os.getenv("IMAP_FETCH_BATCH", 100))

    # Credenciales compartidas SMTP/IMAP
    MAIL_USERNAME: str = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD: str = os.getenv("MAIL_PASSWORD", "")

    # Cuentas desechables
    ETHEREAL_API: str = os.getenv("ETHEREAL_API", "https://api.nodemailer.com")
    HTTP_TIMEOUT: int = int(os.getenv("HTTP_TIMEOUT", 30))

    # ───────── helpers ─────────
    def smtp_enabled(self) -> bool:
        return bool(self.SMTP_HOST.strip()) and self.SMTP_PORT > 0

    def imap_enabled(self) -> bool:
        return bool(self.IMAP_HOST.strip()) and self.IMAP_PORT > 0

    def account_config(self) -> AccountConfig:
        return AccountConfig.from_params(
            username=self.MAIL_USERNAME,
            password=self.MAIL_PASSWORD,
            smtp_host=self.SMTP_HOST.strip(),
            smtp_port=self.SMTP_PORT,
            smtp_secure=self.SMTP_SECURE,
            imap_host=self.IMAP_HOST.strip(),
            imap_port=self.IMAP_PORT,
            imap_secure=self.IMAP_SECURE,
        )
