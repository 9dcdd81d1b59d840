"""
Command-line interface for CMB Life Python SDK
Provides key generation and direct access to the platform operations
"""

import argparse
import json
import logging
import sys
from typing import Optional

from . import __version__
from .client import CMBLifeClient
from .config import ClientConfig, config_from_env, load_config
from .crypto.rsa_keys import DEFAULT_KEY_SIZE, generate_key_pair, write_key_pair
from .exceptions import CMBLifeSDKError, HttpError
from .signing import DeepLinkEncoding


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='cmblife-cli',
        description='CMB Life open platform command-line interface'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'CMB Life Python SDK {__version__}'
    )

    parser.add_argument(
        '--config',
        help='JSON configuration file (defaults to CMBLIFE_* environment variables)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_keygen_parser(subparsers)
    setup_operation_parsers(subparsers)

    return parser


def setup_keygen_parser(subparsers):
    """Setup key generation subcommand."""
    keygen_parser = subparsers.add_parser('keygen', help='Generate an RSA key pair for the merchant')
    keygen_parser.add_argument(
        '--bits',
        type=int,
        default=DEFAULT_KEY_SIZE,
        help=f'Key size in bits (default: {DEFAULT_KEY_SIZE})'
    )
    keygen_parser.add_argument('--private-out', help='Write the private key to this file')
    keygen_parser.add_argument('--public-out', help='Write the public key to this file')


def setup_operation_parsers(subparsers):
    """Setup platform operation subcommands."""
    approval_parser = subparsers.add_parser('approval', help='Print a signed authorization deep link')
    approval_parser.add_argument('--state', required=True, help='Client state value')
    approval_parser.add_argument('--callback', help='Callback URL or JavaScript function name')
    approval_parser.add_argument('--client-type', choices=['app', 'h5'], help='Override the default client type')
    approval_parser.add_argument(
        '--legacy-encoding',
        action='store_true',
        help='Use the deprecated encodeURI style percent-encoding'
    )

    token_parser = subparsers.add_parser('access-token', help='Exchange an authorization code for an access token')
    token_parser.add_argument('--code', required=True, help='Temporary authorization code')
    token_parser.add_argument('--client-type', choices=['app', 'h5'], help='Override the default client type')
    token_parser.add_argument('--verify', action='store_true', help='Verify the response signature')

    increase_parser = subparsers.add_parser('increase-treasure', help='Credit treasure to a user')
    increase_parser.add_argument('--open-id', required=True, help='User open id')
    increase_parser.add_argument('--amount', required=True, type=int, help='Number of points')
    increase_parser.add_argument('--ref-token', help='Merchant reference token (timestamp if omitted)')
    increase_parser.add_argument('--verify', action='store_true', help='Verify the response signature')

    query_parser = subparsers.add_parser('query-treasure', help='Query the status of a treasure credit')
    query_parser.add_argument('--open-id', required=True, help='User open id')
    query_parser.add_argument('--ref-token', required=True, help='Reference token of the credit')
    query_parser.add_argument('--verify', action='store_true', help='Verify the response signature')

    verify_parser = subparsers.add_parser('verify', help='Verify the signature of a saved response')
    verify_parser.add_argument('response', help="Response JSON file ('-' for stdin)")


def load_client_config(args) -> ClientConfig:
    """Load configuration from --config or the environment."""
    if args.config:
        return load_config(args.config)
    return config_from_env()


def handle_keygen_command(args) -> int:
    """Handle key generation command."""
    if bool(args.private_out) != bool(args.public_out):
        print("Error: --private-out and --public-out must be given together", file=sys.stderr)
        return 1

    key_pair = generate_key_pair(args.bits)

    if args.private_out:
        write_key_pair(key_pair, args.private_out, args.public_out)
        print(f"Private key written to: {args.private_out}")
        print(f"Public key written to: {args.public_out}")
    else:
        print(key_pair.private_pem.decode('ascii'), end='')
        print(key_pair.public_pem.decode('ascii'), end='')
    return 0


def print_response(client: CMBLifeClient, response, verify: bool) -> int:
    """Print a response and optionally its verification result."""
    print(json.dumps(response.raw, ensure_ascii=False, indent=2))

    if verify:
        verified = client.verify_response(response)
        print(f"Signature verification: {'✓ VERIFIED' if verified else '✗ FAILED'}", file=sys.stderr)
        if not verified:
            return 1
    return 0 if response.is_success else 1


def handle_operation_command(args) -> int:
    """Handle commands that need a configured client."""
    with CMBLifeClient(load_client_config(args)) as client:
        if args.command == 'approval':
            encoding = DeepLinkEncoding.LEGACY if args.legacy_encoding else DeepLinkEncoding.COMPONENT
            print(client.get_approval(args.state, args.callback, args.client_type, encoding))
            return 0

        if args.command == 'access-token':
            response = client.get_access_token(args.code, args.client_type)
            return print_response(client, response, args.verify)

        if args.command == 'increase-treasure':
            response = client.increase_treasure(args.open_id, args.amount, args.ref_token)
            print(f"Reference token: {response.ref_token}", file=sys.stderr)
            return print_response(client, response, args.verify)

        if args.command == 'query-treasure':
            response = client.query_increase_treasure(args.open_id, args.ref_token)
            return print_response(client, response, args.verify)

        # verify
        if args.response == '-':
            data = json.load(sys.stdin)
        else:
            with open(args.response, 'r', encoding='utf-8') as f:
                data = json.load(f)

        if not isinstance(data, dict):
            print("Error: response must be a JSON object", file=sys.stderr)
            return 1

        if not client.verifier.enabled:
            print("Error: no public key configured", file=sys.stderr)
            return 1

        verified = client.verify_response(data)
        print(f"Signature verification: {'✓ VERIFIED' if verified else '✗ FAILED'}")
        return 0 if verified else 1


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(name)s %(levelname)s %(message)s')

    try:
        if args.command == 'keygen':
            return handle_keygen_command(args)
        elif args.command is not None:
            return handle_operation_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except HttpError as e:
        print(f"Server returned HTTP {e.status_code}", file=sys.stderr)
        return 1
    except CMBLifeSDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
