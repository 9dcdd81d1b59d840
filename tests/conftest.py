"""
Shared fixtures for the CMB Life SDK test suite
"""

import base64
import json
from unittest.mock import MagicMock

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from cmblife_sdk import CMBLifeClient, ClientConfig, CMBLifeHttpClient, ServerConfig
from cmblife_sdk.signing import canonicalize


@pytest.fixture(scope="session")
def rsa_private_key():
    """RSA key shared by the merchant and the simulated platform."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_pem(rsa_private_key):
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    )


@pytest.fixture(scope="session")
def public_pem(rsa_private_key):
    return rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )


@pytest.fixture
def key_files(tmp_path, private_pem, public_pem):
    """Private and public key PEM files."""
    private_path = tmp_path / "merchant_private.pem"
    public_path = tmp_path / "platform_public.pem"
    private_path.write_bytes(private_pem)
    public_path.write_bytes(public_pem)
    return str(private_path), str(public_path)


@pytest.fixture
def client_config(key_files):
    private_path, public_path = key_files
    return ClientConfig(
        merchant_id="308999170120001",
        application_id="00000001",
        private_key_path=private_path,
        public_key_path=public_path,
    )


@pytest.fixture
def sign_response(rsa_private_key):
    """Sign a response the way the platform does (no prefix)."""
    def _sign(fields):
        signature = rsa_private_key.sign(
            canonicalize(fields).encode('utf-8'),
            padding.PKCS1v15(),
            hashes.SHA256()
        )
        signed = dict(fields)
        signed['sign'] = base64.b64encode(signature).decode('ascii')
        return signed
    return _sign


def make_response(status_code=200, body=b'{}'):
    """Build a mocked requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.content = body if isinstance(body, bytes) else json.dumps(body).encode('utf-8')
    return response


@pytest.fixture
def mock_session():
    """Mocked requests session answering with an empty JSON object."""
    session = MagicMock()
    session.post.return_value = make_response()
    return session


@pytest.fixture
def client(client_config, mock_session):
    http_client = CMBLifeHttpClient(ServerConfig(host=client_config.host), session=mock_session)
    return CMBLifeClient(client_config, http_client=http_client)


@pytest.fixture
def response_factory():
    """Factory for mocked requests.Response objects."""
    return make_response
