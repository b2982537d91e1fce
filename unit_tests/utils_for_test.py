# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Help Utility to build certificates and streams for the unittests."""

import functools
import io
from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed25519, rsa
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID
from pyasn1.codec.der import decoder, encoder
from pyasn1_alt_modules import rfc5280


class CountingStream(io.BytesIO):
    """A binary stream which counts the reads that returned data.

    The final read which reports the end of the stream is not counted, so a stream consumed
    in one pass over a single buffer has a `read_count` of 1.
    """

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.read_count = 0
        self.call_count = 0

    def read(self, size=-1):
        self.call_count += 1
        data = super().read(size)
        if data:
            self.read_count += 1
        return data


class ChunkedRawStream(io.RawIOBase):
    """An unbuffered binary stream which returns at most `chunk_size` bytes per read, like a pipe."""

    def __init__(self, data: bytes, chunk_size: int = 512):
        super().__init__()
        self._data = data
        self._pos = 0
        self.chunk_size = chunk_size

    def readable(self):
        return True

    def readinto(self, buffer):
        chunk = self._data[self._pos : self._pos + min(len(buffer), self.chunk_size)]
        buffer[: len(chunk)] = chunk
        self._pos += len(chunk)
        return len(chunk)


class FailingStream(io.RawIOBase):
    """A binary stream whose `read` always fails."""

    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("device not ready")


@functools.lru_cache(maxsize=None)
def get_issuer_key() -> rsa.RSAPrivateKey:
    """Return the RSA key which signs all test certificates."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@functools.lru_cache(maxsize=None)
def get_rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@functools.lru_cache(maxsize=None)
def get_dsa_key() -> dsa.DSAPrivateKey:
    return dsa.generate_private_key(key_size=2048)


@functools.lru_cache(maxsize=None)
def get_ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@functools.lru_cache(maxsize=None)
def get_ed25519_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


def build_certificate(public_key, common_name: str = "Hans Mustermann") -> x509.Certificate:
    """Build a self-issued test certificate for the public key, signed by the issuer key.

    :param public_key: The subject public key.
    :param common_name: The common name of the subject and the issuer.
    :return: The certificate.
    """
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365))
        .sign(get_issuer_key(), hashes.SHA256())
    )


def build_certificate_der(public_key) -> bytes:
    """Build a test certificate for the public key and return the DER encoding."""
    return build_certificate(public_key).public_bytes(Encoding.DER)


def build_certificate_pem(public_key) -> bytes:
    """Build a test certificate for the public key and return the PEM encoding."""
    return build_certificate(public_key).public_bytes(Encoding.PEM)


def rsa_certificate_der() -> bytes:
    return build_certificate_der(get_rsa_key().public_key())


def dsa_certificate_der() -> bytes:
    return build_certificate_der(get_dsa_key().public_key())


def ec_certificate_der() -> bytes:
    return build_certificate_der(get_ec_key().public_key())


def ed25519_certificate_der() -> bytes:
    return build_certificate_der(get_ed25519_key().public_key())


def set_certificate_version(der_data: bytes, version: int) -> bytes:
    """Change the version field of a DER-encoded certificate, leaving the signature untouched.

    :param der_data: The DER-encoded certificate.
    :param version: The raw version value, e.g. 2 for v3.
    :return: The re-encoded certificate.
    """
    cert, _ = decoder.decode(der_data, asn1Spec=rfc5280.Certificate())
    cert["tbsCertificate"]["version"] = version
    return encoder.encode(cert)
