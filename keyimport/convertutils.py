# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Provides conversions between big integers and the encoding used inside the serialized keys.

Big integers are stored as the web-safe Base64 encoding (without the `=` padding) of their
minimal big-endian two's-complement representation, so a positive value whose highest bit
is set gets a leading zero byte.
"""

import base64
import binascii
from typing import Union

from robot.api.deco import not_keyword

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


@not_keyword
def int_to_twos_complement(value: int) -> bytes:
    """Convert an integer to its minimal big-endian two's-complement byte representation.

    :param value: The integer to convert.
    :return: The encoded bytes, at least one byte long.
    """
    bits = value.bit_length() if value >= 0 else (~value).bit_length()
    return value.to_bytes(bits // 8 + 1, byteorder="big", signed=True)


@not_keyword
def int_to_b64(value: int) -> str:
    """Encode an integer as web-safe Base64 string without padding.

    :param value: The integer to encode.
    :return: The encoded string.
    """
    return base64.urlsafe_b64encode(int_to_twos_complement(value)).rstrip(b"=").decode("ascii")


@not_keyword
def b64_to_int(data: Union[str, bytes]) -> int:
    """Decode a web-safe Base64 string, with or without padding, into an integer.

    :param data: The encoded integer.
    :return: The decoded integer.
    :raises ValueError: If the data is not valid Base64 or is empty.
    """
    if isinstance(data, bytes):
        data = data.decode("ascii")

    data = data.strip().rstrip("=")
    if not data:
        raise ValueError("Cannot decode an empty string to an integer.")

    try:
        standard = data.translate(_URLSAFE_TO_STANDARD) + "=" * (-len(data) % 4)
        raw = base64.b64decode(standard, validate=True)
    except binascii.Error as err:
        raise ValueError(f"Invalid Base64 encoded integer: {data!r}") from err

    return int.from_bytes(raw, byteorder="big", signed=True)
