# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Import the public key of a single X509 certificate as key and metadata of the key-management toolkit.

The reader parses the certificate lazily: the stream is read on the first call to
`get_public_key`, `get_key`, `get_metadata` or `read`, and the outcome is kept for all later
calls. A failed import stays failed, the same error is raised again, because the stream
has already been consumed.

The reader does no locking. Callers sharing one reader between threads have to serialize
the first call themselves.
"""

import enum
import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from cryptography.hazmat.primitives.asymmetric import dsa, rsa
from pyasn1_alt_modules import rfc5280
from robot.api.deco import keyword, not_keyword

from keyimport import certutils, utils
from keyimport.config_vars import ImportConfig
from keyimport.exceptions import CertificateError, ConfigError, KeyImportError, UnsupportedKeyError
from keyimport.keydata import (
    DsaPublicKeyData,
    ImportResult,
    PublicKeyData,
    RsaPublicKeyData,
    build_certificate_metadata,
)
from keyimport.keyenums import KeyPurpose, KeyStatus, KeyType, RsaPadding
from keyimport.oidutils import SUPPORTED_KEY_OID_2_NAME, may_return_oid_to_name

# Certificate keys are always stored as the only version.
CERTIFICATE_KEY_VERSION = 1


class ReaderState(enum.Enum):
    """The parse state of a `X509CertificateReader`."""

    UNPARSED = enum.auto()
    PARSED = enum.auto()
    FAILED = enum.auto()


class KeyReader(ABC):
    """Interface of a source of a serialized key and its metadata."""

    @abstractmethod
    def get_key(self, version: Optional[int] = None) -> str:
        """Return the serialized key of the given version, or of the primary version."""

    @abstractmethod
    def get_metadata(self) -> str:
        """Return the serialized metadata."""


@dataclass(frozen=True)
class ImportRequest:
    """The arguments of a single certificate import.

    Attributes:
        purpose: The purpose to tag the key with.
        certificate_stream: The binary stream positioned at the start of the certificate.
        padding: The padding for RSA keys. `None` selects `OAEP` for RSA and is required for DSA.

    """

    purpose: KeyPurpose
    certificate_stream: BinaryIO
    padding: Optional[RsaPadding] = None

    @staticmethod
    def create(
        purpose: Optional[Union[KeyPurpose, str]],
        certificate_stream: Optional[BinaryIO],
        padding: Optional[Union[RsaPadding, str]] = None,
    ) -> "ImportRequest":
        """Validate the arguments and build the request.

        :param purpose: The key purpose or its name.
        :param certificate_stream: The binary certificate stream.
        :param padding: The RSA padding or its name.
        :return: The validated request.
        :raises ConfigError: If the purpose or the stream is missing, or a name is unknown.
        """
        if purpose is None or (isinstance(purpose, str) and purpose.strip() == ""):
            raise ConfigError("MissingPurpose")
        if certificate_stream is None:
            raise ConfigError("MissingStream")
        if not callable(getattr(certificate_stream, "read", None)):
            raise ConfigError(
                "MissingStream", message=f"X509Certificate stream must be readable, got: {type(certificate_stream)}"
            )

        try:
            purpose = KeyPurpose.get(purpose)
        except ValueError as err:
            raise ConfigError("InvalidPurpose", purpose=purpose) from err

        if padding is not None:
            try:
                padding = RsaPadding.get(padding)
            except ValueError as err:
                raise ConfigError("InvalidPadding", message=str(err), padding=padding) from err

        return ImportRequest(purpose=purpose, certificate_stream=certificate_stream, padding=padding)


class X509CertificateReader(KeyReader):
    """Reads the public key of one X509 certificate and tags it with a purpose and a padding."""

    def __init__(
        self,
        purpose: Union[KeyPurpose, str],
        certificate_stream: BinaryIO,
        padding: Optional[Union[RsaPadding, str]] = None,
        config: Optional[ImportConfig] = None,
    ):
        """Create a reader, without reading from the stream.

        :param purpose: The purpose of the key.
        :param certificate_stream: The binary stream holding one DER- or PEM-encoded certificate.
        :param padding: The padding to associate with the key. May be `None` for RSA keys, in
        which case it defaults to `OAEP`. Must be `None` for DSA keys.
        :param config: The import configuration. Defaults to `ImportConfig()`.
        :raises ConfigError: If the purpose or the stream is missing.
        """
        self.request = ImportRequest.create(purpose, certificate_stream, padding)
        self.config = config or ImportConfig()
        self._state = ReaderState.UNPARSED
        self._result: Optional[ImportResult] = None
        self._error: Optional[Exception] = None

    @property
    def state(self) -> ReaderState:
        """Return the current parse state."""
        return self._state

    def read(self) -> ImportResult:
        """Return the imported key and metadata, parsing the certificate on the first call.

        :return: The import result.
        :raises CertificateError: If the data is not a well-formed certificate.
        :raises UnsupportedKeyError: If the key is neither RSA nor DSA.
        :raises ConfigError: If the padding or the purpose does not fit the key.
        """
        if self._state == ReaderState.UNPARSED:
            self._transition()

        if self._state == ReaderState.FAILED:
            raise self._error  # type: ignore[misc]

        return self._result  # type: ignore[return-value]

    def get_public_key(self) -> str:
        """Return the serialized public key."""
        return self.read().key_json

    def get_key(self, version: Optional[int] = None) -> str:
        """Return the serialized public key.

        :param version: The requested version. Only version 1 exists.
        :raises ConfigError: If another version is requested.
        """
        if version is not None:
            try:
                version_number = int(version)
            except (TypeError, ValueError) as err:
                raise ConfigError("InvalidKeyVersion", version=version) from err
            if version_number != CERTIFICATE_KEY_VERSION:
                raise ConfigError("InvalidKeyVersion", version=version)
        return self.get_public_key()

    def get_metadata(self) -> str:
        """Return the serialized metadata."""
        return self.read().metadata_json

    def _transition(self) -> None:
        """Run the import once and move to `PARSED` or `FAILED`."""
        try:
            result = self._import_certificate()
        except Exception as err:
            self._error = err
            self._state = ReaderState.FAILED
            if isinstance(err, KeyImportError):
                logging.info("Importing the certificate failed: %s: %s", type(err).__name__, err)
            raise

        self._result = result
        self._state = ReaderState.PARSED

    def _import_certificate(self) -> ImportResult:
        """Parse the certificate, build the typed key and the metadata."""
        logging.debug("Import configuration: %s", self.config.to_dict())
        data = certutils.read_certificate_stream(self.request.certificate_stream, self.config)
        cert = certutils.parse_certificate(data, self.config)
        key = _build_public_key(cert, self.request.padding)

        if self.request.purpose.is_encryption and key.key_type == KeyType.DSA_PUB:
            raise ConfigError("InvalidUseOfDsaKey", purpose=self.request.purpose.value)

        metadata = build_certificate_metadata(self.request.purpose, key.key_type)
        logging.debug("Imported %s key of %d bits for %s.", key.key_type.value, key.size, metadata.purpose.value)
        return ImportResult(key=key, metadata=metadata)


def _build_public_key(cert: rfc5280.Certificate, padding: Optional[RsaPadding]) -> PublicKeyData:
    """Classify the certificate's public key and build the matching key object.

    :param cert: The parsed certificate.
    :param padding: The padding hint of the request.
    :return: The RSA or DSA public key.
    :raises UnsupportedKeyError: If the key is neither RSA nor DSA.
    :raises ConfigError: If a padding is given for a DSA key.
    :raises CertificateError: If the key cannot be decoded.
    """
    oid = certutils.get_public_key_algorithm(cert)
    family = SUPPORTED_KEY_OID_2_NAME.get(oid)
    if family is None:
        raise UnsupportedKeyError(may_return_oid_to_name(oid), oid=oid)

    logging.debug("Certificate carries a %s public key.", family)

    if family == "DSA" and padding is not None:
        raise ConfigError("InvalidPadding", padding=padding.name)

    public_key = certutils.load_public_key_from_cert(cert)
    if family == "RSA" and isinstance(public_key, rsa.RSAPublicKey):
        return RsaPublicKeyData.from_crypto_key(public_key, padding=padding or RsaPadding.OAEP)

    if family == "DSA" and isinstance(public_key, dsa.DSAPublicKey):
        return DsaPublicKeyData.from_crypto_key(public_key)

    raise CertificateError(f"The public key does not match its {family} algorithm identifier.")


@keyword(name="Import Public Key From Certificate")
def import_public_key_from_certificate(  # noqa D417 undocumented-param
    cert: Union[bytes, str],
    purpose: Union[KeyPurpose, str],
    padding: Optional[Union[RsaPadding, str]] = None,
) -> ImportResult:
    """Import the public key of a certificate together with its metadata.

    Arguments:
    ---------
        - `cert`: The DER- or PEM-encoded certificate, or the path to a certificate file.
        - `purpose`: The purpose of the key, e.g. "sign_verify".
        - `padding`: The RSA padding, e.g. "pkcs". Defaults to `None` (OAEP for RSA keys).

    Returns:
    -------
        - The `ImportResult` with the key and the metadata.

    Raises:
    ------
        - `ConfigError`: If the purpose or the padding is invalid for the key.
        - `CertificateError`: If the data is not a well-formed certificate.
        - `UnsupportedKeyError`: If the key is neither RSA nor DSA.

    Examples:
    --------
    | ${result}= | Import Public Key From Certificate | ${cert_der} | sign_verify |
    | ${result}= | Import Public Key From Certificate | data/rsa-cert.pem | encrypt_decrypt | padding=pkcs |

    """
    if isinstance(cert, str):
        cert = utils.load_certificate_bytes(cert)

    reader = X509CertificateReader(purpose, io.BytesIO(cert), padding)
    return reader.read()


@keyword(name="Key Metadata Must Be Single Primary Version")
def key_metadata_must_be_single_primary_version(result: ImportResult) -> None:  # noqa D417 undocumented-param
    """Check that the metadata of an import holds exactly one primary, exportable version 1.

    Arguments:
    ---------
        - `result`: The result of an import.

    Raises:
    ------
        - `ValueError`: If the metadata does not have the expected shape.

    Examples:
    --------
    | Key Metadata Must Be Single Primary Version | ${result} |

    """
    versions = result.metadata.versions
    if len(versions) != 1:
        raise ValueError(f"Expected exactly one key version, got: {len(versions)}")

    version = versions[0]
    if version.version_number != CERTIFICATE_KEY_VERSION:
        raise ValueError(f"Expected key version 1, got: {version.version_number}")
    if version.status != KeyStatus.PRIMARY or not version.exportable:
        raise ValueError(f"Expected a primary, exportable version, got: {version.to_dict()}")
    if result.metadata.key_type != result.key.key_type:
        raise ValueError(
            f"The metadata type {result.metadata.key_type.value} does not match the key type "
            f"{result.key.key_type.value}."
        )


@not_keyword
def open_certificate_reader(
    path: str, purpose: Union[KeyPurpose, str], padding: Optional[Union[RsaPadding, str]] = None
) -> X509CertificateReader:
    """Create a reader for a certificate file.

    The file is loaded into memory, so the caller has no stream to close.

    :param path: The path to the DER- or PEM-encoded certificate.
    :param purpose: The purpose of the key.
    :param padding: The RSA padding.
    :return: The reader.
    """
    return X509CertificateReader(purpose, io.BytesIO(utils.load_certificate_bytes(path)), padding)
