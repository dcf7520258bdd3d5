import hashlib
import hmac
import logging

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from prbridge.settings import Settings


WEBHOOK_SECRET = "test-secret-123"


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


@pytest.fixture(autouse=True)
def capture_prbridge_logs(monkeypatch):
    # The prbridge base logger does not propagate; caplog listens on root
    monkeypatch.setattr(logging.getLogger("prbridge"), "propagate", True)


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key) -> str:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def public_key_pem(rsa_key) -> str:
    return rsa_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


@pytest.fixture
def settings() -> Settings:
    return Settings(github_webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
def app_settings(private_key_pem) -> Settings:
    return Settings(
        github_webhook_secret=WEBHOOK_SECRET,
        github_app_id="123",
        github_private_key=private_key_pem,
        github_installation_id="99",
    )
