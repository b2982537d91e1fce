# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Contains the custom exceptions raised while importing a key from a certificate.

Every error carries a `message_key`, which selects the message template, and the structured
context fields needed to render it. Rendering of the default English text happens in `render_message`.
"""

from typing import List, Optional, Union

from pyasn1.type import univ

MESSAGES = {
    "MissingPurpose": "X509Certificate purpose must not be null",
    "MissingStream": "X509Certificate stream must not be null",
    "InvalidPurpose": "Invalid key purpose: {purpose}",
    "InvalidPadding": "Invalid padding for DSA key: {padding}",
    "InvalidUseOfDsaKey": "DSA key cannot be used for encryption",
    "InvalidKeyVersion": "Certificate keys only have version 1, got: {version}",
    "InvalidCertificate": "Invalid certificate",
    "UnsupportedKeyType": "Unrecognized key type {algorithm} in certificate",
}


def render_message(message_key: str, **fields) -> str:
    """Render the default message for a message key.

    :param message_key: The key into the message table.
    :param fields: The context values for the template.
    :return: The rendered message, or the key itself if it is unknown.
    """
    template = MESSAGES.get(message_key)
    if template is None:
        return message_key
    try:
        return template.format(**fields)
    except KeyError:
        return template


class KeyImportError(Exception):
    """Base class for all errors raised while importing a key from a certificate."""

    message_key: str = "InvalidCertificate"
    error_details: List[str]

    def __init__(self, message: Optional[str] = None, error_details: Optional[Union[List[str], str]] = None, **fields):
        """Initialize the exception with the message.

        :param message: The message to display. Rendered from the `message_key` if not provided.
        :param error_details: Additional details about the error.
        :param fields: Structured context used to render the message.
        """
        self.fields = fields
        self.message = message or render_message(self.message_key, **fields)
        if error_details is None:
            self.error_details = []
        elif isinstance(error_details, str):
            self.error_details = [error_details]
        else:
            self.error_details = list(error_details)
        super().__init__(self.message)

    def get_error_details(self) -> List[str]:
        """Return the error details."""
        return self.error_details


class ConfigError(KeyImportError):
    """Raised when the import arguments are missing or form an invalid combination."""

    message_key = "InvalidPurpose"

    def __init__(self, message_key: str, message: Optional[str] = None, **fields):
        """Initialize the exception with the message key.

        :param message_key: The key of the message template, e.g. "InvalidPadding".
        :param message: Optional message overriding the rendered template.
        """
        self.message_key = message_key
        super().__init__(message, **fields)


class CertificateError(KeyImportError):
    """Raised when the data is not a well-formed X.509 certificate.

    The message is always the generic "invalid certificate" text, the reason is kept in the
    error details and the underlying decode error is chained as `__cause__`.
    """

    message_key = "InvalidCertificate"

    def __init__(self, reason: Optional[str] = None):
        """Initialize the exception with an optional reason.

        :param reason: Why the data was rejected, only added to the error details.
        """
        self.reason = reason
        super().__init__(error_details=reason)


class UnsupportedKeyError(KeyImportError):
    """Raised when the certificate carries a public key which is neither RSA nor DSA."""

    message_key = "UnsupportedKeyType"

    def __init__(self, algorithm: str, oid: Optional[univ.ObjectIdentifier] = None):
        """Initialize the exception with the offending algorithm.

        :param algorithm: The name of the algorithm, or the dotted OID if the name is unknown.
        :param oid: The OID of the `subjectPublicKeyInfo` algorithm.
        """
        self.algorithm = algorithm
        self.oid = oid
        super().__init__(algorithm=algorithm)
