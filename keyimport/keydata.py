# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Dataclass objects for the imported public keys and their metadata.

The objects serialize to the JSON layout of the key-management toolkit:

RSA public key::

    {"modulus": <b64>, "publicExponent": <b64>, "size": <int>, "padding": "OAEP" | "PKCS"}

DSA public key::

    {"y": <b64>, "p": <b64>, "q": <b64>, "g": <b64>, "size": <int>}

Metadata::

    {"name": <str>, "purpose": <KeyPurpose>, "type": <KeyType>,
     "versions": [{"versionNumber": 1, "status": "PRIMARY", "exportable": true}], "encrypted": false}

Big integers are encoded with `convertutils.int_to_b64`.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from cryptography.hazmat.primitives.asymmetric import dsa, rsa

from keyimport.convertutils import b64_to_int, int_to_b64
from keyimport.keyenums import KeyPurpose, KeyStatus, KeyType, RsaPadding

# The name given to every key imported from a certificate.
CERTIFICATE_KEY_NAME = "imported from certificate"


def _dump_json(data: Dict[str, Any]) -> str:
    """Serialize a dictionary in the canonical layout used for keys and metadata."""
    return json.dumps(data, separators=(",", ":"))


class PublicKeyData(ABC):
    """Capability interface for the public keys which can be imported from a certificate."""

    key_type: KeyType

    @property
    @abstractmethod
    def size(self) -> int:
        """Return the size of the key in bits."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return the serializable fields of the key."""

    @abstractmethod
    def to_crypto_key(self) -> Union[rsa.RSAPublicKey, dsa.DSAPublicKey]:
        """Return the key as `cryptography` public key."""

    def describe(self) -> Tuple[KeyType, Dict[str, Any]]:
        """Return the key type and the serializable fields of the key."""
        return self.key_type, self.to_dict()

    def to_json(self) -> str:
        """Serialize the key to its JSON representation."""
        return _dump_json(self.to_dict())

    def __str__(self) -> str:
        return self.to_json()


@dataclass(frozen=True)
class RsaPublicKeyData(PublicKeyData):
    """An RSA public key imported from a certificate.

    Attributes:
        modulus: The RSA modulus `n`.
        public_exponent: The public exponent `e`.
        padding: The padding used for encryption. Defaults to `OAEP`.

    """

    modulus: int
    public_exponent: int
    padding: RsaPadding = RsaPadding.OAEP
    key_type = KeyType.RSA_PUB

    @property
    def size(self) -> int:
        """Return the bit length of the modulus."""
        return self.modulus.bit_length()

    def to_dict(self) -> Dict[str, Any]:
        """Return the serializable fields of the key."""
        return {
            "modulus": int_to_b64(self.modulus),
            "publicExponent": int_to_b64(self.public_exponent),
            "size": self.size,
            "padding": self.padding.value,
        }

    def to_crypto_key(self) -> rsa.RSAPublicKey:
        """Return the key as `cryptography` RSA public key."""
        return rsa.RSAPublicNumbers(e=self.public_exponent, n=self.modulus).public_key()

    @staticmethod
    def from_crypto_key(public_key: rsa.RSAPublicKey, padding: RsaPadding = RsaPadding.OAEP) -> "RsaPublicKeyData":
        """Build the key from a `cryptography` RSA public key.

        :param public_key: The key to read the modulus and exponent from.
        :param padding: The padding to associate with the key.
        :return: The populated `RsaPublicKeyData`.
        """
        numbers = public_key.public_numbers()
        return RsaPublicKeyData(modulus=numbers.n, public_exponent=numbers.e, padding=padding)

    @staticmethod
    def from_json(data: Union[str, Dict[str, Any]]) -> "RsaPublicKeyData":
        """Parse a serialized RSA public key.

        :param data: The JSON string or the already decoded dictionary.
        :return: The parsed key.
        :raises ValueError: If the size does not match the modulus.
        """
        if isinstance(data, str):
            data = json.loads(data)

        key = RsaPublicKeyData(
            modulus=b64_to_int(data["modulus"]),
            public_exponent=b64_to_int(data["publicExponent"]),
            padding=RsaPadding.get(data.get("padding", RsaPadding.OAEP.value)),
        )
        if "size" in data and int(data["size"]) != key.size:
            raise ValueError(f"The RSA key size {data['size']} does not match the modulus size {key.size}.")
        return key


@dataclass(frozen=True)
class DsaPublicKeyData(PublicKeyData):
    """A DSA public key imported from a certificate.

    Attributes:
        y: The public value.
        p: The prime modulus.
        q: The subgroup order.
        g: The generator.

    """

    y: int
    p: int
    q: int
    g: int
    key_type = KeyType.DSA_PUB

    @property
    def size(self) -> int:
        """Return the bit length of the prime `p`."""
        return self.p.bit_length()

    def to_dict(self) -> Dict[str, Any]:
        """Return the serializable fields of the key."""
        return {
            "y": int_to_b64(self.y),
            "p": int_to_b64(self.p),
            "q": int_to_b64(self.q),
            "g": int_to_b64(self.g),
            "size": self.size,
        }

    def to_crypto_key(self) -> dsa.DSAPublicKey:
        """Return the key as `cryptography` DSA public key."""
        params = dsa.DSAParameterNumbers(p=self.p, q=self.q, g=self.g)
        return dsa.DSAPublicNumbers(y=self.y, parameter_numbers=params).public_key()

    @staticmethod
    def from_crypto_key(public_key: dsa.DSAPublicKey) -> "DsaPublicKeyData":
        """Build the key from a `cryptography` DSA public key.

        :param public_key: The key to read `y` and the domain parameters from.
        :return: The populated `DsaPublicKeyData`.
        """
        numbers = public_key.public_numbers()
        params = numbers.parameter_numbers
        return DsaPublicKeyData(y=numbers.y, p=params.p, q=params.q, g=params.g)

    @staticmethod
    def from_json(data: Union[str, Dict[str, Any]]) -> "DsaPublicKeyData":
        """Parse a serialized DSA public key.

        :param data: The JSON string or the already decoded dictionary.
        :return: The parsed key.
        """
        if isinstance(data, str):
            data = json.loads(data)

        return DsaPublicKeyData(
            y=b64_to_int(data["y"]),
            p=b64_to_int(data["p"]),
            q=b64_to_int(data["q"]),
            g=b64_to_int(data["g"]),
        )


@dataclass(frozen=True)
class KeyVersion:
    """A single generation of a key within a keyset."""

    version_number: int
    status: KeyStatus = KeyStatus.ACTIVE
    exportable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Return the serializable fields of the version."""
        return {
            "versionNumber": self.version_number,
            "status": self.status.value,
            "exportable": self.exportable,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "KeyVersion":
        """Parse a version entry of the serialized metadata."""
        return KeyVersion(
            version_number=int(data["versionNumber"]),
            status=KeyStatus.get(data["status"]),
            exportable=bool(data.get("exportable", False)),
        )


@dataclass(frozen=True)
class KeyMetadata:
    """The metadata envelope describing a keyset.

    Attributes:
        name: The name of the keyset.
        purpose: The declared purpose of the key.
        key_type: The type of the key.
        versions: The ordered key versions.
        encrypted: If the key material is encrypted. Always `False` for imported public keys.

    """

    name: str
    purpose: KeyPurpose
    key_type: KeyType
    versions: Tuple[KeyVersion, ...] = field(default_factory=tuple)
    encrypted: bool = False

    def add_version(self, version: KeyVersion) -> "KeyMetadata":
        """Return a copy of the metadata with the version appended.

        :param version: The version to add.
        :return: The new metadata.
        :raises ValueError: If the version number is already used.
        """
        if any(v.version_number == version.version_number for v in self.versions):
            raise ValueError(f"The key version {version.version_number} already exists.")
        return KeyMetadata(
            name=self.name,
            purpose=self.purpose,
            key_type=self.key_type,
            versions=self.versions + (version,),
            encrypted=self.encrypted,
        )

    def get_primary_version(self) -> KeyVersion:
        """Return the primary version.

        :raises ValueError: If no version is primary.
        """
        for version in self.versions:
            if version.status == KeyStatus.PRIMARY:
                return version
        raise ValueError(f"The keyset '{self.name}' has no primary version.")

    def to_dict(self) -> Dict[str, Any]:
        """Return the serializable fields of the metadata."""
        return {
            "name": self.name,
            "purpose": self.purpose.value,
            "type": self.key_type.value,
            "versions": [version.to_dict() for version in self.versions],
            "encrypted": self.encrypted,
        }

    def to_json(self) -> str:
        """Serialize the metadata to its JSON representation."""
        return _dump_json(self.to_dict())

    def __str__(self) -> str:
        return self.to_json()

    @staticmethod
    def from_json(data: Union[str, Dict[str, Any]]) -> "KeyMetadata":
        """Parse serialized metadata.

        :param data: The JSON string or the already decoded dictionary.
        :return: The parsed metadata.
        """
        if isinstance(data, str):
            data = json.loads(data)

        return KeyMetadata(
            name=data["name"],
            purpose=KeyPurpose.get(data["purpose"]),
            key_type=KeyType.get(data["type"]),
            versions=tuple(KeyVersion.from_dict(entry) for entry in data.get("versions", [])),
            encrypted=bool(data.get("encrypted", False)),
        )


@dataclass(frozen=True)
class ImportResult:
    """The public key and the metadata produced by a successful import."""

    key: PublicKeyData
    metadata: KeyMetadata

    @property
    def key_json(self) -> str:
        """Return the serialized key."""
        return self.key.to_json()

    @property
    def metadata_json(self) -> str:
        """Return the serialized metadata."""
        return self.metadata.to_json()


def build_certificate_metadata(purpose: KeyPurpose, key_type: KeyType) -> KeyMetadata:
    """Build the metadata of a key imported from a certificate.

    An imported key is always the sole, primary and exportable version 1, because there is
    no existing keyset to reconcile it against.

    :param purpose: The purpose of the key.
    :param key_type: The type of the imported key.
    :return: The metadata with exactly one version.
    """
    metadata = KeyMetadata(name=CERTIFICATE_KEY_NAME, purpose=purpose, key_type=key_type)
    return metadata.add_version(KeyVersion(1, KeyStatus.PRIMARY, exportable=True))
