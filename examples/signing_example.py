#!/usr/bin/env python3
"""
CMB Life Python SDK - Signing Example

Generates a throwaway merchant key, builds an authorization deep link and
shows the signed form body of an access token request without sending it.
"""

import os
import sys
import tempfile

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from cmblife_sdk import (
    CMBLifeClient,
    ClientConfig,
    generate_key_pair,
    build_sign_string,
)
from cmblife_sdk.crypto import write_key_pair
from cmblife_sdk.http_client import encode_form

def main():
    with tempfile.TemporaryDirectory() as key_dir:
        print("1. Generating RSA key pair...")
        private_path = os.path.join(key_dir, "merchant_private.pem")
        public_path = os.path.join(key_dir, "merchant_public.pem")
        write_key_pair(generate_key_pair(), private_path, public_path)

        config = ClientConfig(
            merchant_id="308999170120001",
            application_id="00000001",
            private_key_path=private_path,
            public_key_path=public_path,
        )

        with CMBLifeClient(config) as client:
            print("\n2. Authorization deep link:")
            print(f"   {client.get_approval('demo-state', 'https://shop.example.com/callback')}")

            print("\n3. Access token request (not sent):")
            fields = client.signer.sign_json("accessToken", {
                'mid': config.merchant_id,
                'aid': config.application_id,
                'clientType': config.default_client_type,
                'grantType': 'authorizationCode',
                'code': 'demo-code',
            })
            print(f"   String to sign: {build_sign_string('accessToken.json', fields)}")
            print(f"   Form body: {encode_form(fields)}")


if __name__ == "__main__":
    main()
