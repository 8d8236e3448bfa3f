# application/services/account_factory.py
from __future__ import annotations
import logging

from mailgrab import __version__
from mailgrab.application.services.mailbox_session import MailboxSession
from mailgrab.config.settings import Settings
from mailgrab.domain.models import AccountConfig
from mailgrab.infrastructure.provisioning.ethereal_client import EtherealProvisioner

logger = logging.getLogger(__name__)


def create_account(config: AccountConfig, settings: Settings | None = None) -> MailboxSession:
    """Construye la sesión; no hay I/O de red hasta el primer envío o lectura."""
    st = settings or Settings()
    return MailboxSession(
        config,
        folder=st.IMAP_FOLDER_INBOX,
        fetch_batch=st.IMAP_FETCH_BATCH,
        smtp_timeout=st.SMTP_TIMEOUT,
    )


def create_account_from_env(settings: Settings | None = None) -> MailboxSession:
    st = settings or Settings()
    if not (st.smtp_enabled() or st.imap_enabled()):
        logger.warning("Ni SMTP ni IMAP configurados en el entorno")
    return create_account(st.account_config(), settings=st)


def create_random_account(settings: Settings | None = None) -> MailboxSession:
    """Pide a Ethereal un buzón desechable y devuelve su sesión (útil en tests)."""
    st = settings or Settings()
    provisioner = EtherealProvisioner(
        base=st.ETHEREAL_API,
        requestor="mailgrab",
        version=__version__,
        timeout=st.HTTP_TIMEOUT,
    )
    return create_account(provisioner.create_test_account(), settings=st)
