"""
Client configuration for CMB Life Python SDK

Provides the immutable merchant configuration consumed by ``CMBLifeClient``
and loaders for JSON configuration files and environment variables.
"""

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError
from ..signing.types import ClientType, DEFAULT_NONCE_LENGTH

DEFAULT_HOST = "open.cmbchina.com"
DEFAULT_CLIENT_TYPE = ClientType.H5.value

ENV_PREFIX = "CMBLIFE_"

# Keys accepted in configuration files besides the field names themselves
_KEY_ALIASES = {
    'mid': 'merchant_id',
    'merchantId': 'merchant_id',
    'aid': 'application_id',
    'applicationId': 'application_id',
    'key': 'private_key_path',
    'privateKeyPath': 'private_key_path',
    'publicKey': 'public_key_path',
    'publicKeyPath': 'public_key_path',
    'defaultType': 'default_client_type',
    'defaultClientType': 'default_client_type',
    'verifySsl': 'verify_ssl',
    'nonceLength': 'nonce_length',
    'logCanonicalStrings': 'log_canonical_strings',
}


_FIELD_TYPES = {
    'merchant_id': (str,),
    'application_id': (str,),
    'private_key_path': (str,),
    'public_key_path': (str,),
    'default_client_type': (str,),
    'host': (str,),
    'private_key_password': (str,),
    'timeout': (int, float),
    'verify_ssl': (bool,),
    'nonce_length': (int,),
    'log_canonical_strings': (bool,),
}

_OPTIONAL_FIELDS = {'public_key_path', 'private_key_password', 'timeout'}


@dataclass(frozen=True)
class ClientConfig:
    """
    Merchant configuration for the CMB Life open platform.

    Attributes:
        merchant_id: Merchant number (``mid``)
        application_id: Application id (``aid``)
        private_key_path: PEM file with the merchant RSA private key
        public_key_path: PEM file with the platform RSA public key, used to
            verify responses
        default_client_type: ``app`` or ``h5``
        host: Open platform host name
        private_key_password: Passphrase of an encrypted private key
        timeout: Per-request timeout in seconds; None waits indefinitely
        verify_ssl: Whether to verify TLS certificates
        nonce_length: Length of generated ``random`` values
        log_canonical_strings: Log every string to sign at DEBUG level
    """
    merchant_id: str
    application_id: str
    private_key_path: str
    public_key_path: Optional[str] = None
    default_client_type: str = DEFAULT_CLIENT_TYPE
    host: str = DEFAULT_HOST
    private_key_password: Optional[str] = None
    timeout: Optional[float] = None
    verify_ssl: bool = True
    nonce_length: int = DEFAULT_NONCE_LENGTH
    log_canonical_strings: bool = False

    def __post_init__(self):
        """Validate client configuration."""
        for name, expected in _FIELD_TYPES.items():
            value = getattr(self, name)
            if value is None and name in _OPTIONAL_FIELDS:
                continue
            if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
                raise ConfigurationError(
                    f"{name} has invalid type {type(value).__name__}",
                    "INVALID_TYPE",
                    {'field': name}
                )

        if not self.merchant_id:
            raise ConfigurationError("merchant_id cannot be empty", "MISSING_MERCHANT_ID")

        if not self.application_id:
            raise ConfigurationError("application_id cannot be empty", "MISSING_APPLICATION_ID")

        if not self.private_key_path:
            raise ConfigurationError("private_key_path cannot be empty", "MISSING_PRIVATE_KEY")

        if self.default_client_type not in (ClientType.APP.value, ClientType.H5.value):
            raise ConfigurationError(
                f"default_client_type must be 'app' or 'h5', got {self.default_client_type!r}",
                "INVALID_CLIENT_TYPE"
            )

        if not self.host or "/" in self.host:
            raise ConfigurationError(f"Invalid host: {self.host!r}", "INVALID_HOST")

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("Timeout must be positive", "INVALID_TIMEOUT")

        if self.nonce_length <= 0:
            raise ConfigurationError("nonce_length must be positive", "INVALID_NONCE_LENGTH")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ClientConfig':
        """
        Build a configuration from a mapping.

        Field names and the camelCase keys used by the platform's other
        client libraries (``mid``, ``aid``, ``key``, ``publicKey``,
        ``defaultType``...) are both accepted.

        Raises:
            ConfigurationError: On unknown keys or missing required values
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown configuration key: {key}", "UNKNOWN_KEY")
            values[name] = value

        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigurationError(f"Incomplete configuration: {e}", "INVALID_FORMAT") from e


def load_config(file_path: Union[str, Path]) -> ClientConfig:
    """
    Load client configuration from a JSON file.

    Relative key paths are resolved against the configuration file's
    directory.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(file_path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file: {e}", "FILE_ERROR") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object", "INVALID_FORMAT")

    config = ClientConfig.from_dict(data)

    base = path.parent
    updates = {}
    for name in ('private_key_path', 'public_key_path'):
        value = getattr(config, name)
        if value and not Path(value).is_absolute():
            updates[name] = str(base / value)
    if updates:
        config = replace(config, **updates)
    return config


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """
    Load client configuration from ``CMBLIFE_*`` environment variables.

    Recognized variables: ``CMBLIFE_MERCHANT_ID``, ``CMBLIFE_APPLICATION_ID``,
    ``CMBLIFE_PRIVATE_KEY_PATH``, ``CMBLIFE_PUBLIC_KEY_PATH``,
    ``CMBLIFE_CLIENT_TYPE``, ``CMBLIFE_HOST``, ``CMBLIFE_TIMEOUT``.

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    if environ is None:
        environ = os.environ

    def get(name: str) -> Optional[str]:
        return environ.get(ENV_PREFIX + name) or None

    values: Dict[str, Any] = {
        'merchant_id': get('MERCHANT_ID') or '',
        'application_id': get('APPLICATION_ID') or '',
        'private_key_path': get('PRIVATE_KEY_PATH') or '',
        'public_key_path': get('PUBLIC_KEY_PATH'),
        'private_key_password': get('PRIVATE_KEY_PASSWORD'),
    }
    if get('CLIENT_TYPE'):
        values['default_client_type'] = get('CLIENT_TYPE')
    if get('HOST'):
        values['host'] = get('HOST')
    if get('TIMEOUT'):
        try:
            values['timeout'] = float(get('TIMEOUT'))
        except ValueError as e:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}TIMEOUT: {e}", "INVALID_TIMEOUT") from e

    return ClientConfig(**values)
