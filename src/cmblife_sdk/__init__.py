"""
CMB Life Python SDK
Signed requests for the CMB Life open platform
"""

from .version import __version__
from .client import CMBLifeClient
from .config import (
    ClientConfig,
    DEFAULT_HOST,
    load_config,
    config_from_env,
)
from .crypto import (
    RSAKeyPair,
    generate_key_pair,
    load_private_key,
    load_public_key,
)
from .exceptions import (
    CMBLifeSDKError,
    ConfigurationError,
    ValidationError,
    CryptoError,
    NetworkError,
    HttpError,
    ProtocolError,
)
from .http_client import (
    CMBLifeHttpClient,
    ServerConfig,
    create_client,
)
from .operations import (
    ApprovalRequest,
    AccessTokenRequest,
    IncreaseTreasureRequest,
    QueryIncreaseTreasureRequest,
    ApiResponse,
    AccessTokenResponse,
    TreasureResponse,
)
from .signing import (
    RSASigner,
    create_signer,
    canonicalize,
    build_sign_string,
    DeepLinkEncoding,
    ClientType,
    SigningMode,
    generate_nonce,
    generate_timestamp,
)
from .verification import (
    ResponseVerifier,
    create_verifier,
)


# Public API exports
__all__ = [
    '__version__',
    # Client
    'CMBLifeClient',
    'ClientConfig',
    'DEFAULT_HOST',
    'load_config',
    'config_from_env',
    # Keys
    'RSAKeyPair',
    'generate_key_pair',
    'load_private_key',
    'load_public_key',
    # Exceptions
    'CMBLifeSDKError',
    'ConfigurationError',
    'ValidationError',
    'CryptoError',
    'NetworkError',
    'HttpError',
    'ProtocolError',
    # HTTP Client
    'CMBLifeHttpClient',
    'ServerConfig',
    'create_client',
    # Operations
    'ApprovalRequest',
    'AccessTokenRequest',
    'IncreaseTreasureRequest',
    'QueryIncreaseTreasureRequest',
    'ApiResponse',
    'AccessTokenResponse',
    'TreasureResponse',
    # Request Signing
    'RSASigner',
    'create_signer',
    'canonicalize',
    'build_sign_string',
    'DeepLinkEncoding',
    'ClientType',
    'SigningMode',
    'generate_nonce',
    'generate_timestamp',
    # Verification
    'ResponseVerifier',
    'create_verifier',
]
