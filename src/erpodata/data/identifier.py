# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Reversible mapping between internal integer keys and external GUIDs.

Storage keys are 32-bit unsigned integers; the wire exposes them as GUIDs
whose byte array (``uuid.UUID.bytes_le``, the layout .NET clients use) holds
the integer little-endian in bytes 0..4 and zeros in bytes 4..16::

    encode(1)  -> UUID('00000001-0000-0000-0000-000000000000')
    decode(UUID('00000001-0000-0000-0000-000000000000')) -> 1

Every decode validates the zero tail, whatever the GUID's origin, so a
foreign GUID can never be truncated into a valid-looking key.
"""

from __future__ import annotations

import uuid

from erpodata.kernel.exceptions import InvalidIdentifierEncodingError

_ID_BYTES = 4
_GUID_BYTES = 16
_ZERO_TAIL = bytes(_GUID_BYTES - _ID_BYTES)
MAX_ID = 2**32 - 1


def encode(value: int) -> uuid.UUID:
    """Encode an internal identifier as an external GUID."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Identifier must be an int, got {type(value).__name__}")
    if not 0 <= value <= MAX_ID:
        raise ValueError(f"Identifier {value} is outside the unsigned 32-bit range")
    return uuid.UUID(bytes_le=value.to_bytes(_ID_BYTES, "little") + _ZERO_TAIL)


def decode(guid: uuid.UUID) -> int:
    """Decode an external GUID back to the internal identifier.

    Raises:
        InvalidIdentifierEncodingError: If any byte past offset 4 is non-zero.
    """
    raw = guid.bytes_le
    if raw[_ID_BYTES:] != _ZERO_TAIL:
        raise InvalidIdentifierEncodingError(
            f"Identifier '{guid}' does not match the expected pattern",
            context={"identifier": str(guid)},
        )
    return int.from_bytes(raw[:_ID_BYTES], "little")


def parse(text: str) -> int:
    """Parse a GUID string (bare, braced or ``urn:uuid:``) and decode it.

    Raises:
        InvalidIdentifierEncodingError: If *text* is not a GUID or does not
            follow the identifier layout.
    """
    try:
        guid = uuid.UUID(text.strip())
    except ValueError as exc:
        raise InvalidIdentifierEncodingError(
            f"Identifier '{text}' is not a valid GUID",
            context={"identifier": text},
        ) from exc
    return decode(guid)
