# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Enums for the key purposes, types, states and paddings of imported keys.

The member values are the names used inside the serialized key and metadata, so that
the output can be read by the key-management toolkit.
"""

import enum


class _NamedEnum(enum.Enum):
    """Enum with a case-insensitive lookup by name."""

    @classmethod
    def get_names_lowercase(cls):
        """Return the names of all enum members in lowercase."""
        return [member.name.lower() for member in cls]

    @classmethod
    def get(cls, value):
        """Return the enum member that matches the provided value (case-insensitive).

        :param value: The name of the enum member, or the member itself.
        :return: The corresponding enum member.
        :raises ValueError: If the value does not match any enum member.
        """
        if isinstance(value, cls):
            return value

        value_upper = str(value).strip().replace("-", "_").upper()

        try:
            return cls[value_upper]
        except KeyError as err:
            raise ValueError(
                f"'{value}' is not a valid {cls.__name__}. Available values are:"
                f" {', '.join(cls.get_names_lowercase())}."
            ) from err


class KeyPurpose(_NamedEnum):
    """The declared use of a key."""

    ENCRYPT_DECRYPT = "ENCRYPT_DECRYPT"
    ENCRYPT = "ENCRYPT"  # public key only
    SIGN_VERIFY = "SIGN_VERIFY"
    VERIFY = "VERIFY"  # public key only

    @property
    def is_encryption(self) -> bool:
        """Whether keys with this purpose are used for encryption."""
        return self in (KeyPurpose.ENCRYPT_DECRYPT, KeyPurpose.ENCRYPT)


class KeyType(_NamedEnum):
    """The type of public key produced by the import."""

    RSA_PUB = "RSA_PUB"
    DSA_PUB = "DSA_PUB"


class KeyStatus(_NamedEnum):
    """The status of a key version inside a keyset."""

    PRIMARY = "PRIMARY"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class RsaPadding(_NamedEnum):
    """The padding scheme for RSA encryption."""

    OAEP = "OAEP"
    PKCS = "PKCS"  # PKCS#1 v1.5
