"""Exception hierarchy for incremental encoding conversion.

Malformed input, unmappable characters and output-buffer exhaustion are
ordinary statuses of the incremental protocol and are never raised from it.
The exceptions below cover programmer-contract violations, the exact-name
registry lookup and the fatal mode of the streaming helpers.
"""

from typing import Optional


class IncrementalEncodingError(Exception):
    """Base exception for all errors raised by this package."""


class UnknownEncodingError(IncrementalEncodingError, LookupError):
    """Raised when an exact encoding name does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Not the name of an encoding: {name!r}")
        self.name = name


class StreamFinishedError(IncrementalEncodingError, RuntimeError):
    """Raised when a decoder or encoder is used after its stream has ended."""


class MalformedInputError(IncrementalEncodingError, ValueError):
    """Raised by the streaming helpers for malformed input in fatal mode.

    Attributes:
        encoding: Name of the encoding being decoded
        position: Stream offset just past the malformed sequence
        length: Length of the malformed byte sequence
    """

    def __init__(self, encoding: str, position: int, length: int) -> None:
        super().__init__(
            f"Malformed {encoding} sequence of {length} byte(s) ending at "
            f"stream offset {position}"
        )
        self.encoding = encoding
        self.position = position
        self.length = length


class UnmappableCharacterError(IncrementalEncodingError, ValueError):
    """Raised by the streaming helpers for unmappable characters in fatal mode.

    Attributes:
        encoding: Name of the target encoding
        character: The character that has no representation
        position: Character offset of the unmappable character, if known
    """

    def __init__(
        self, encoding: str, character: str, position: Optional[int] = None
    ) -> None:
        super().__init__(
            f"U+{ord(character):04X} cannot be encoded in {encoding}"
            + (f" (input offset {position})" if position is not None else "")
        )
        self.encoding = encoding
        self.character = character
        self.position = position
