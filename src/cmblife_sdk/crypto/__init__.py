"""
RSA key material helpers for the CMB Life SDK
"""

from .rsa_keys import (
    RSAKeyPair,
    DEFAULT_KEY_SIZE,
    read_key_file,
    load_private_key,
    load_public_key,
    load_private_key_file,
    load_public_key_file,
    generate_key_pair,
    write_key_pair,
)

__all__ = [
    'RSAKeyPair',
    'DEFAULT_KEY_SIZE',
    'read_key_file',
    'load_private_key',
    'load_public_key',
    'load_private_key_file',
    'load_public_key_file',
    'generate_key_pair',
    'write_key_pair',
]
