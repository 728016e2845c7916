"""Exception hierarchy for the probeinterface model."""

from __future__ import annotations


class ProbeInterfaceError(Exception):
    """Base exception for the probeinterface model."""


class InvalidStructure(ProbeInterfaceError, ValueError):
    """Raised when a required field is missing or null, the probe list is
    empty, or a document cannot be read as a probe group."""


class LengthMismatch(ProbeInterfaceError, ValueError):
    """Raised when a per-contact array disagrees with the contact count of its probe.

    Attributes:
        probe_index: Position of the offending probe in its group.
        field: Name of the offending array.
        expected: Number of contacts of the probe.
        actual: Length of the offending array.
    """

    def __init__(self, probe_index: int, field: str, expected: int, actual: int, message: str | None = None) -> None:
        if message is None:
            message = (f"'{field}' has {actual} elements in probe {probe_index}, "
                       f"but the probe has {expected} contacts")
        super().__init__(message)
        self.probe_index = probe_index
        self.field = field
        self.expected = expected
        self.actual = actual


class DuplicateChannelIndex(ProbeInterfaceError, ValueError):
    """Raised when device channel indices other than -1 repeat across a probe group.

    Attributes:
        duplicates: Sorted list of the repeated channel indices.
    """

    def __init__(self, duplicates, message: str | None = None) -> None:
        self.duplicates = sorted(int(d) for d in duplicates)
        if message is None:
            message = ("Device channel indices are not unique across all probes "
                       f"(repeated: {', '.join(str(d) for d in self.duplicates)}). "
                       "Ensure that all values are either -1 or are unique.")
        super().__init__(message)


class MalformedContactId(ProbeInterfaceError, ValueError):
    """Raised when a contact ID cannot be parsed as an integer.

    Attributes:
        probe_index: Position of the offending probe in its group.
        contact_index: Position of the contact within the probe.
        contact_id: The offending ID.
    """

    def __init__(self, probe_index: int, contact_index: int, contact_id) -> None:
        super().__init__(
            f"Contact ID {contact_id!r} of contact {contact_index} in probe {probe_index} "
            "is not an integer")
        self.probe_index = probe_index
        self.contact_index = contact_index
        self.contact_id = contact_id
