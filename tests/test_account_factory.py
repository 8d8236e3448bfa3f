from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from mailgrab.application.services import account_factory
from mailgrab.application.services.account_factory import (
    create_account,
    create_account_from_env,
    create_random_account,
)
from mailgrab.config.settings import Settings
from mailgrab.domain.models import AccountConfig, ServerConfig
from mailgrab.infrastructure.provisioning import ethereal_client
from mailgrab.infrastructure.provisioning.ethereal_client import EtherealProvisioner

ETHEREAL_OK = {
    "status": "success",
    "user": "pasquale.corkery@ethereal.email",
    "pass": "ew7YV7AGDmvD9T3yBs",
    "smtp": {"host": "smtp.ethereal.email", "port": 587, "secure": False},
    "imap": {"host": "imap.ethereal.email", "port": 993, "secure": True},
    "pop3": {"host": "pop3.ethereal.email", "port": 995, "secure": True},
    "web": "https://ethereal.email",
}


def fake_response(payload: dict, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


def make_settings(**kwargs) -> Settings:
    base = dict(
        SMTP_HOST="", SMTP_PORT=0, IMAP_HOST="imap.example.test", IMAP_PORT=993,
        MAIL_USERNAME="user@example.test", MAIL_PASSWORD="secret",
        IMAP_FOLDER_INBOX="INBOX", IMAP_FETCH_BATCH=50,
        ETHEREAL_API="https://api.example.test", HTTP_TIMEOUT=5,
    )
    base.update(kwargs)
    return Settings(**base)


def test_create_account_applies_settings() -> None:
    config = AccountConfig("u", "p", imap=ServerConfig("imap.example.test", 993))

    session = create_account(config, settings=make_settings(IMAP_FOLDER_INBOX="Codes"))

    assert session.config is config
    assert session.folder == "Codes"
    assert session.inbox.fetch_batch == 50
    assert session.outbox is None


def test_create_account_from_env_uses_settings_credentials() -> None:
    session = create_account_from_env(make_settings(SMTP_HOST="smtp.example.test", SMTP_PORT=465))

    assert session.username == "user@example.test"
    assert session.outbox is not None
    assert session.inbox.host == "imap.example.test"


def test_create_random_account_provisions_ethereal(monkeypatch) -> None:
    post = MagicMock(return_value=fake_response(ETHEREAL_OK))
    monkeypatch.setattr(ethereal_client.requests, "post", post)

    session = create_random_account(make_settings())

    assert session.username == "pasquale.corkery@ethereal.email"
    assert session.password == "ew7YV7AGDmvD9T3yBs"
    assert session.config.smtp == ServerConfig("smtp.ethereal.email", 587, False)
    assert session.config.imap == ServerConfig("imap.ethereal.email", 993, True)
    url = post.call_args.args[0]
    assert url == "https://api.example.test/user"
    assert post.call_args.kwargs["json"]["requestor"] == "mailgrab"
    assert post.call_args.kwargs["json"]["version"] == account_factory.__version__
    assert post.call_args.kwargs["timeout"] == 5


def test_provisioner_rejects_non_success_payload(monkeypatch) -> None:
    monkeypatch.setattr(
        ethereal_client.requests, "post",
        MagicMock(return_value=fake_response({"status": "error", "error": "rate limited"})),
    )

    with pytest.raises(RuntimeError, match="Ethereal error"):
        EtherealProvisioner().create_test_account()


def test_provisioner_propagates_http_errors(monkeypatch) -> None:
    monkeypatch.setattr(ethereal_client.requests, "post", MagicMock(return_value=fake_response({}, status=503)))

    with pytest.raises(requests.HTTPError):
        EtherealProvisioner().create_test_account()
