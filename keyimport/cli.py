# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Command line entry point to import the public key of a certificate.

It prints the metadata and the key, in the layout expected by the key-management toolkit,
so that the output can be stored as `meta` and `1` of a new keyset.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from keyimport.exceptions import KeyImportError
from keyimport.keyenums import KeyPurpose, RsaPadding
from keyimport.x509reader import open_certificate_reader

log = logging.getLogger("keyimport")


def prepare_parser() -> argparse.ArgumentParser:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Import the public key of an X509 certificate",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples of usage:

1. Import an RSA certificate as encryption key, with the default OAEP padding:
   keyimport --purpose encrypt_decrypt data/rsa-cert.pem

2. Import an RSA certificate with PKCS#1 v1.5 padding:
   keyimport --purpose encrypt --padding pkcs data/rsa-cert.der

3. Import a DSA certificate as verification key:
   keyimport --purpose verify data/dsa-cert.pem
""",
    )
    parser.add_argument("certificate", help="Path to the DER- or PEM-encoded certificate")
    parser.add_argument(
        "--purpose",
        required=True,
        type=str.lower,
        choices=KeyPurpose.get_names_lowercase(),
        help="The purpose of the imported key",
    )
    parser.add_argument(
        "--padding",
        type=str.lower,
        choices=RsaPadding.get_names_lowercase(),
        default=None,
        help="The padding of an RSA key, defaults to OAEP. Must not be set for DSA keys",
    )
    parser.add_argument("--pretty", help="Indent the JSON output", action="store_true", default=False)
    parser.add_argument(
        "--verbose", help="Display additional debugging information", action="store_true", default=False
    )
    return parser


def _format(data: str, pretty: bool) -> str:
    """Return the JSON data, indented if requested."""
    if not pretty:
        return data
    return json.dumps(json.loads(data), indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    """Import the certificate given on the command line and print the metadata and the key."""
    parser = prepare_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING, format="%(asctime)s %(levelname)5s - %(message)s"
    )
    if args.verbose:
        log.debug(args)

    try:
        reader = open_certificate_reader(args.certificate, args.purpose, args.padding)
        metadata = reader.get_metadata()
        key = reader.get_public_key()
    except OSError as err:
        log.error("Cannot read %s: %s", args.certificate, err)
        return 1
    except KeyImportError as err:
        log.error("Cannot import %s: %s", args.certificate, err.message)
        for detail in err.get_error_details():
            log.info(detail)
        return 1

    print(_format(metadata, args.pretty))
    print(_format(key, args.pretty))
    return 0


if __name__ == "__main__":
    sys.exit(main())
