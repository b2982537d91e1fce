# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Utilities for loading and decoding certificate data."""

from base64 import b64decode
from typing import Union

from robot.api.deco import keyword, not_keyword

PEM_BEGIN_MARKER = b"-----BEGIN"


@not_keyword
def is_pem_encoded(data: bytes) -> bool:
    """Check whether the data starts with a PEM armour, ignoring leading whitespace and comments.

    :param data: The raw data to examine.
    :return: `True` if the first significant line is a `-----BEGIN` line.
    """
    for line in data.splitlines():
        line = line.strip()
        if line == b"" or line.startswith(b"#"):
            continue
        return line.startswith(PEM_BEGIN_MARKER)
    return False


@keyword(name="Decode PEM String")
def decode_pem_string(data: Union[bytes, str], allow_trailing_data: bool = True) -> bytes:
    """Decode a PEM-encoded string or byte sequence to its raw DER-encoded bytes.

    Only the first armoured block is decoded; lines starting with a `#` and blank lines are ignored.

    :param data: (str, bytes) the data to decode.
    :param allow_trailing_data: Whether content after the first `-----END` line is ignored. If `False`,
    such content, e.g. a second certificate of a bundle, is rejected.
    :return: bytes The decoded DER-encoded bytes extracted from the PEM input
    :raises ValueError: If no data is found, the content is not valid Base64 or trailing content is not allowed.
    """
    if isinstance(data, bytes):
        data = data.decode("ascii")

    filtered_lines = []
    block_ended = False
    # first do some cosmetic filtering
    for line in data.splitlines():
        line = line.strip()
        if line.startswith("#"):  # remove comments
            continue
        if line == "":  # remove blank lines
            continue
        if block_ended:
            if allow_trailing_data:
                break
            raise ValueError("The PEM data has content after the first END line.")
        if line.startswith("-----END"):
            block_ended = True
            continue
        if line.startswith("-----BEGIN"):
            continue

        filtered_lines.append(line)

    if not filtered_lines:
        raise ValueError("The PEM data does not contain any content.")

    # note that b64decode doesn't care about \n in the string to be decoded.
    return b64decode("".join(filtered_lines), validate=True)


@keyword("Load And Decode PEM File")
def load_and_decode_pem_file(path: str) -> bytes:
    """Load a base64-encoded PEM file, with or without a header, ignore comments, and return the decoded data.

    This is an augmented version of the PEM format, which allows one to add comments to the file, by starting the
    line with a # character. This is purely a convenience for the user, and is not part of the standard.

    :param path: str, path to the file you want to load
    :returns: bytes, the data loaded from the file.
    """
    with open(path, "r", encoding="ascii") as f:
        return decode_pem_string(f.read())


@not_keyword
def load_certificate_bytes(path: str) -> bytes:
    """Load a certificate file as it is stored, either as DER or as PEM.

    :param path: The path to the certificate file.
    :return: The raw content of the file.
    """
    with open(path, "rb") as f:
        return f.read()

