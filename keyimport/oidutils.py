# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Defines the Object Identifiers of the public key algorithms found in certificates."""

from pyasn1.type import univ
from pyasn1_alt_modules import rfc6664, rfc9481
from robot.api.deco import not_keyword

# RFC 3279 Section 2.3.2
id_dsa = univ.ObjectIdentifier("1.2.840.10040.4.1")

# RFC 3279 Section 2.3.3
dhpublicnumber = univ.ObjectIdentifier("1.2.840.10046.2.1")

SUPPORTED_KEY_OID_2_NAME = {
    rfc9481.rsaEncryption: "RSA",
    id_dsa: "DSA",
}

# The names follow the algorithm names reported for the keys by common certificate libraries.
UNSUPPORTED_KEY_OID_2_NAME = {
    rfc6664.id_ecPublicKey: "EC",
    rfc9481.id_RSASSA_PSS: "RSASSA-PSS",
    rfc9481.id_RSAES_OAEP: "RSAES-OAEP",
    rfc9481.id_Ed25519: "Ed25519",
    rfc9481.id_Ed448: "Ed448",
    rfc9481.id_X25519: "X25519",
    rfc9481.id_X448: "X448",
    dhpublicnumber: "DH",
}

PUBLIC_KEY_OID_2_NAME = {}
PUBLIC_KEY_OID_2_NAME.update(SUPPORTED_KEY_OID_2_NAME)
PUBLIC_KEY_OID_2_NAME.update(UNSUPPORTED_KEY_OID_2_NAME)


@not_keyword
def may_return_oid_to_name(oid: univ.ObjectIdentifier) -> str:
    """Check if the oid is Known and then returns a human-readable representation, or the dotted string.

    :param oid: The OID to perform the lookup for.
    :return: Either a human-readable name or the OID as dotted string.
    """
    out = PUBLIC_KEY_OID_2_NAME.get(oid)
    if out is not None:
        return out
    return str(oid)
