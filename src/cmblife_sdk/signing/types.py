"""
Type definitions and constants for request signing

The platform signs a flat field mapping. The bytes that get signed are the
canonical string of the mapping prefixed by an operation identifier, either
``<operation>.json`` for form POST operations or ``cmblife://<operation>``
for deep links opened by the CMB Life app.
"""

from typing import Any, Dict, List, Union
from enum import Enum


CMBLIFE_SCHEME = "cmblife://"
JSON_SUFFIX = ".json"

SIGN_FIELD = "sign"
DATE_FIELD = "date"
RANDOM_FIELD = "random"

DEFAULT_NONCE_LENGTH = 16
DATE_FORMAT = "%Y%m%d%H%M%S"


class SigningMode(str, Enum):
    """Prefix flavour used when building the string to sign"""
    JSON = "json"
    CMBLIFE = "cmblife"


class DeepLinkEncoding(str, Enum):
    """
    How field values are percent-encoded in a materialized deep link.

    COMPONENT escapes every reserved character (``encodeURIComponent``
    semantics) and is what the platform documents. LEGACY keeps URI
    delimiters such as ``+ / = & ?`` unescaped (``encodeURI`` semantics);
    it is what early versions of the client emitted and is deprecated.
    """
    COMPONENT = "component"
    LEGACY = "legacy"


class ClientType(str, Enum):
    """Where the authorization flow returns to"""
    APP = "app"
    H5 = "h5"


class SigningErrorCodes:
    """Standard error codes for signing operations"""
    
    # Configuration errors
    INVALID_PRIVATE_KEY = "INVALID_PRIVATE_KEY"
    INVALID_PUBLIC_KEY = "INVALID_PUBLIC_KEY"
    KEY_FILE_UNREADABLE = "KEY_FILE_UNREADABLE"
    UNSUPPORTED_KEY_TYPE = "UNSUPPORTED_KEY_TYPE"
    
    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"
    INVALID_NONCE_LENGTH = "INVALID_NONCE_LENGTH"
    INVALID_OPERATION = "INVALID_OPERATION"


# Type aliases for convenience
FieldValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]
SignablePayload = Dict[str, FieldValue]
