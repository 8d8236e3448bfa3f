# infrastructure/provisioning/ethereal_client.py
# Cuentas desechables de Ethereal (la API que usa nodemailer.createTestAccount)
from __future__ import annotations
import logging
from typing import Any, Dict

import requests

from mailgrab.domain.models import AccountConfig, ServerConfig

logger = logging.getLogger(__name__)


class EtherealProvisioner:
    def __init__(self, *, base: str = "https://api.nodemailer.com", requestor: str = "mailgrab", version: str = "0", timeout: float = 30) -> None:
        self.base = base.rstrip("/")
        self.requestor = requestor
        self.version = version
        self.timeout = timeout

    def _post(self, url: str, json: Dict[str, Any]) -> Dict[str, Any]:
        r = requests.post(url, json=json, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_test_account(self) -> AccountConfig:
        data = self._post(f"{self.base}/user", {"requestor": self.requestor, "version": self.version})
        if data.get("status") != "success":
            raise RuntimeError(f"Ethereal error: {data}")

        smtp, imap = data["smtp"], data["imap"]
        logger.info("Cuenta Ethereal creada: %s", data["user"])
        return AccountConfig(
            username=data["user"],
            password=data["pass"],
            smtp=ServerConfig(smtp["host"], int(smtp["port"]), bool(smtp["secure"])),
            imap=ServerConfig(imap["host"], int(imap["port"]), bool(imap["secure"])),
        )
