"""
RSA key material handling for CMB Life Python SDK

Merchants sign requests with an RSA private key registered on the open
platform and may verify responses with the platform's RSA public key. Both
are PEM files that are read once, when a client is constructed.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..exceptions import ConfigurationError, ValidationError


DEFAULT_KEY_SIZE = 2048
MIN_KEY_SIZE = 1024
PUBLIC_EXPONENT = 65537

PathLike = Union[str, Path]


@dataclass(frozen=True)
class RSAKeyPair:
    """
    PEM encoded RSA key pair.
    
    Attributes:
        private_pem: PKCS#8 private key, unencrypted
        public_pem: SubjectPublicKeyInfo public key
    """
    private_pem: bytes
    public_pem: bytes


def read_key_file(path: PathLike) -> bytes:
    """
    Read a key file fully into memory.
    
    Raises:
        ConfigurationError: If the file is missing or unreadable
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read key file {path}: {e}",
            "KEY_FILE_UNREADABLE",
            {"path": str(path)}
        ) from e


def load_private_key(pem: bytes, password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """
    Parse a PEM RSA private key (PKCS#1 or PKCS#8).
    
    Args:
        pem: PEM encoded key
        password: Passphrase for encrypted keys
        
    Returns:
        RSAPrivateKey: Parsed key
        
    Raises:
        ConfigurationError: If the key cannot be parsed or is not RSA
    """
    try:
        key = serialization.load_pem_private_key(pem, password=password)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid RSA private key: {e}",
            "INVALID_PRIVATE_KEY"
        ) from e
    
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError(
            f"Private key must be RSA, got {type(key).__name__}",
            "UNSUPPORTED_KEY_TYPE"
        )
    return key


def load_public_key(pem: bytes) -> rsa.RSAPublicKey:
    """
    Parse a PEM RSA public key.
    
    Both SubjectPublicKeyInfo (``BEGIN PUBLIC KEY``) and PKCS#1
    (``BEGIN RSA PUBLIC KEY``) encodings are accepted.
    
    Raises:
        ConfigurationError: If the key cannot be parsed or is not RSA
    """
    try:
        key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid RSA public key: {e}",
            "INVALID_PUBLIC_KEY"
        ) from e
    
    if not isinstance(key, rsa.RSAPublicKey):
        raise ConfigurationError(
            f"Public key must be RSA, got {type(key).__name__}",
            "UNSUPPORTED_KEY_TYPE"
        )
    return key


def load_private_key_file(path: PathLike, password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """Read and parse a PEM RSA private key file."""
    return load_private_key(read_key_file(path), password)


def load_public_key_file(path: PathLike) -> rsa.RSAPublicKey:
    """Read and parse a PEM RSA public key file."""
    return load_public_key(read_key_file(path))


def generate_key_pair(key_size: int = DEFAULT_KEY_SIZE) -> RSAKeyPair:
    """
    Generate a fresh RSA key pair, e.g. to register with the platform.
    
    Args:
        key_size: Modulus size in bits
        
    Returns:
        RSAKeyPair: PEM encoded keys
        
    Raises:
        ValidationError: If key_size is too small
    """
    if key_size < MIN_KEY_SIZE:
        raise ValidationError(
            f"Key size must be at least {MIN_KEY_SIZE} bits",
            "INVALID_KEY_SIZE"
        )
    
    private_key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)
    
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return RSAKeyPair(private_pem=private_pem, public_pem=public_pem)


def write_key_pair(key_pair: RSAKeyPair, private_path: PathLike, public_path: PathLike) -> None:
    """
    Write a key pair to disk, the private key readable by the owner only.
    
    Raises:
        ConfigurationError: If either file cannot be written
    """
    try:
        private_file = Path(private_path)
        private_file.write_bytes(key_pair.private_pem)
        private_file.chmod(0o600)
        Path(public_path).write_bytes(key_pair.public_pem)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot write key files: {e}",
            "KEY_FILE_UNREADABLE",
            {"private_path": str(private_path), "public_path": str(public_path)}
        ) from e
