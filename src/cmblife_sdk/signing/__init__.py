"""
CMB Life Python SDK - Request Signing Module

Canonical string construction and RSA-SHA256 signing of platform requests,
for both form POST operations and ``cmblife://`` deep links.
"""

from .types import (
    CMBLIFE_SCHEME,
    SIGN_FIELD,
    DEFAULT_NONCE_LENGTH,
    SigningMode,
    DeepLinkEncoding,
    ClientType,
    SigningErrorCodes,
)

from .canonical import (
    canonicalize,
    build_sign_string,
    operation_prefix,
)

from .signer import (
    RSASigner,
    create_signer,
)

from .utils import (
    generate_nonce,
    generate_timestamp,
    format_value,
    encode_value,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'RSASigner',
    'create_signer',
    'canonicalize',
    'build_sign_string',
    'operation_prefix',
    # Types
    'CMBLIFE_SCHEME',
    'SIGN_FIELD',
    'DEFAULT_NONCE_LENGTH',
    'SigningMode',
    'DeepLinkEncoding',
    'ClientType',
    'SigningErrorCodes',
    # Utilities
    'generate_nonce',
    'generate_timestamp',
    'format_value',
    'encode_value',
]
