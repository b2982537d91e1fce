# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Dataclasses for configuration variables used by the certificate importer."""

from abc import ABC
from dataclasses import dataclass, fields


@dataclass
class ConfigVal(ABC):
    """Base class for configuration values."""

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary."""
        out = {}
        for x in fields(self):
            out[x.name] = getattr(self, x.name)
        return out


@dataclass
class ImportConfig(ConfigVal):
    """Configuration variables for reading a certificate.

    Attributes:
        accept_pem: If a PEM-armoured certificate is accepted. Defaults to `True`.
        allow_trailing_data: If bytes after the DER-encoded certificate, or content after the first PEM block,
            are ignored. Defaults to `False`.
        max_certificate_size: The maximum number of bytes read from the stream. Defaults to `65536`.
        check_version: If only the versions v1, v2 and v3 are accepted. Defaults to `True`.

    """

    accept_pem: bool = True
    allow_trailing_data: bool = False
    max_certificate_size: int = 65536
    check_version: bool = True

    def __post_init__(self):
        """Validate the configured values."""
        if int(self.max_certificate_size) <= 0:
            raise ValueError(f"`max_certificate_size` must be positive, got: {self.max_certificate_size}")
