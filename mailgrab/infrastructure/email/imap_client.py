# infrastructure/email/imap_client.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any

from imapclient import IMAPClient

logger = logging.getLogger(__name__)

FETCH_ITEMS = ["ENVELOPE", "BODYSTRUCTURE", "BODY.PEEK[]"]


@dataclass
class FetchedMail:
    uid: int
    envelope: Any
    body_structure: Any
    source: bytes


class IMAPInbox:
    """
    Handle IMAP de una cuenta. No abre conexión hasta `with inbox:`;
    cada bloque `with` es una sesión completa (login ... logout).
    Una misma instancia NO admite dos sesiones simultáneas.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        ssl: bool = True,
        fetch_batch: int = 100,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.ssl = ssl
        self.fetch_batch = fetch_batch
        self.client: IMAPClient | None = None

    def __enter__(self) -> "IMAPInbox":
        logger.debug("Conectando IMAP %s:%s (ssl=%s)", self.host, self.port, self.ssl)
        self.client = IMAPClient(self.host, port=self.port, ssl=self.ssl)
        try:
            self.client.login(self.user, self.password)
        except Exception:
            self.client.shutdown()
            self.client = None
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        client, self.client = self.client, None
        if client is None:
            return
        if exc_type is None:
            # Sin error previo: un fallo en logout sí se propaga
            client.logout()
            return
        try:
            client.logout()
        except Exception:
            logger.exception("Error cerrando IMAP tras un fallo previo")

    def select_folder(self, folder: str) -> None:
        assert self.client
        self.client.select_folder(folder, readonly=True)

    def search_all(self) -> list[int]:
        """UIDs en el orden que devuelve el servidor (ascendente por asignación)."""
        assert self.client
        return list(self.client.search(["ALL"]))

    def fetch_mails(self, uids: list[int]) -> list[FetchedMail]:
        """
        Descarga sobre/estructura/fuente de cada UID en lotes de `fetch_batch`.
        El resultado sigue el orden de `uids`, no el de la respuesta del servidor.
        """
        assert self.client
        mails: list[FetchedMail] = []
        for start in range(0, len(uids), self.fetch_batch):
            chunk = uids[start:start + self.fetch_batch]
            resp = self.client.fetch(chunk, FETCH_ITEMS)
            for uid in chunk:
                data = resp[uid]
                mails.append(
                    FetchedMail(
                        uid=uid,
                        envelope=data.get(b"ENVELOPE"),
                        body_structure=data.get(b"BODYSTRUCTURE"),
                        source=bytes(data[b"BODY[]"]),
                    )
                )
        return mails
