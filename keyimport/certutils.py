# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Parse X509 certificates and load the public key they carry.

Only the `subjectPublicKeyInfo` of the certificate is used; neither the signature nor the
validity period or the chain are checked here.
"""

import logging
from typing import BinaryIO, Optional, Union

import pyasn1.error
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, rsa
from pyasn1.codec.der import decoder, encoder
from pyasn1.type import univ
from pyasn1_alt_modules import rfc5280
from robot.api.deco import keyword, not_keyword

from keyimport import utils
from keyimport.config_vars import ImportConfig
from keyimport.exceptions import CertificateError
from keyimport.oidutils import may_return_oid_to_name

# v1(0), v2(1), v3(2)
KNOWN_CERT_VERSIONS = (0, 1, 2)


@not_keyword
def read_certificate_stream(stream: BinaryIO, config: Optional[ImportConfig] = None) -> bytes:
    """Read the certificate data from a binary stream in one pass, until end of stream or the maximum size.

    :param stream: The stream positioned at the start of the certificate.
    :param config: The import configuration, which bounds the number of bytes read.
    :return: The raw certificate data.
    :raises CertificateError: If the stream cannot be read, is empty or exceeds the maximum size.
    """
    config = config or ImportConfig()
    max_size = int(config.max_certificate_size)
    chunks = []
    total = 0
    try:
        # raw streams, pipes and sockets may return fewer bytes than requested
        while total <= max_size:
            chunk = stream.read(max_size + 1 - total)
            if isinstance(chunk, str):
                raise CertificateError("The certificate stream must be opened in binary mode.")
            if not chunk:
                break
            chunks.append(bytes(chunk))
            total += len(chunk)
    except (OSError, ValueError) as err:
        raise CertificateError("The certificate stream could not be read.") from err

    if total == 0:
        raise CertificateError("The certificate stream is empty.")
    if total > max_size:
        raise CertificateError(f"The certificate exceeds the maximum size of {max_size} bytes.")

    logging.debug("Read %d bytes of certificate data in %d chunks.", total, len(chunks))
    return b"".join(chunks)


@keyword(name="Parse Certificate")
def parse_certificate(  # noqa D417 undocumented-param
    data: bytes, config: Optional[ImportConfig] = None
) -> rfc5280.Certificate:
    """Parse a DER- or PEM-encoded X509 certificate into a pyasn1 object.

    Arguments:
    ---------
        - `data`: The DER-encoded certificate, or the PEM-encoded one if `accept_pem` is configured.
        - `config`: The import configuration. Defaults to `ImportConfig()`.

    Returns:
    -------
        - The decoded certificate object.

    Raises:
    ------
        - `CertificateError`: If the data is not a well-formed certificate.

    Examples:
    --------
    | ${cert}= | Parse Certificate | ${der_data} |

    """
    config = config or ImportConfig()

    if utils.is_pem_encoded(data):
        if not config.accept_pem:
            raise CertificateError("PEM-encoded certificates are not accepted.")
        try:
            data = utils.decode_pem_string(data, allow_trailing_data=config.allow_trailing_data)
        except ValueError as err:
            raise CertificateError(f"The PEM data could not be decoded: {err}") from err

    try:
        cert, rest = decoder.decode(data, asn1Spec=rfc5280.Certificate())
    except pyasn1.error.PyAsn1Error as err:
        raise CertificateError("The data is not a DER-encoded certificate.") from err

    if rest != b"" and not config.allow_trailing_data:
        raise CertificateError(f"The certificate has {len(rest)} bytes of trailing data.")

    if config.check_version:
        version = int(cert["tbsCertificate"]["version"])
        if version not in KNOWN_CERT_VERSIONS:
            raise CertificateError(f"Unsupported certificate version: {version}.")

    return cert


@not_keyword
def get_public_key_algorithm(cert: rfc5280.Certificate) -> univ.ObjectIdentifier:
    """Return the algorithm OID of the certificate's `subjectPublicKeyInfo`.

    :param cert: The certificate to inspect.
    :return: The algorithm OID.
    """
    return cert["tbsCertificate"]["subjectPublicKeyInfo"]["algorithm"]["algorithm"]


@keyword(name="Load Public Key From Certificate")
def load_public_key_from_cert(  # noqa D417 undocumented-param
    cert: Union[rfc5280.Certificate, bytes],
) -> Union[rsa.RSAPublicKey, dsa.DSAPublicKey]:
    """Load the RSA or DSA public key from a certificate.

    Arguments:
    ---------
        - `cert`: The parsed certificate or its DER/PEM encoding.

    Returns:
    -------
        - The public key as `cryptography` object.

    Raises:
    ------
        - `CertificateError`: If the key cannot be decoded or is neither RSA nor DSA.

    Examples:
    --------
    | ${public_key}= | Load Public Key From Certificate | ${cert} |

    """
    if isinstance(cert, bytes):
        cert = parse_certificate(cert)

    spki = cert["tbsCertificate"]["subjectPublicKeyInfo"]
    name = may_return_oid_to_name(spki["algorithm"]["algorithm"])
    try:
        public_key = serialization.load_der_public_key(encoder.encode(spki))
    except (ValueError, UnsupportedAlgorithm, pyasn1.error.PyAsn1Error) as err:
        raise CertificateError(f"The {name} public key of the certificate could not be decoded.") from err

    if not isinstance(public_key, (rsa.RSAPublicKey, dsa.DSAPublicKey)):
        raise CertificateError(f"The {name} public key is neither an RSA nor a DSA key.")

    return public_key
