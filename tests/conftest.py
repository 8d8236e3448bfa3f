"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys

import pytest

# Raíz del proyecto en el path antes de importar mailgrab
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tests.helpers import FakeIMAPClient


@pytest.fixture
def fake_imap(monkeypatch):
    """Sustituye IMAPClient por un buzón en memoria vacío."""
    from mailgrab.infrastructure.email import imap_client

    FakeIMAPClient.mailbox = {}
    FakeIMAPClient.fail_on = None
    FakeIMAPClient.instances = []
    monkeypatch.setattr(imap_client, "IMAPClient", FakeIMAPClient)
    yield FakeIMAPClient
    FakeIMAPClient.fail_on = None
