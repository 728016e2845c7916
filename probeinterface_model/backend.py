#############
## Imports ##
#############

import logging
import weakref

import numpy as np
import pandas as pd

from .constants import DEFAULT_VERSION, PER_CONTACT_FIELDS, REQUIRED_PROBE_KEYS, UNCONNECTED_CHANNEL
from .constants import SPECIFICATION as PROBEINTERFACE_SPECIFICATION
from .exceptions import DuplicateChannelIndex, InvalidStructure, LengthMismatch, MalformedContactId
from .probe import Probe, as_channel_indices, default_contact_ids, default_contact_plane_axes, default_shank_ids

__all__ = ["ProbeGroup", "ProbeInterfaceGroup", "find_duplicate_channels", "parse_contact_ids"]

logger = logging.getLogger(__name__)

##############################
## Channel index uniqueness ##
##############################


def find_duplicate_channels(device_channel_indices):
    """
    Return the device channel indices that appear more than once.
    -1 marks an unconnected contact and is never reported.

    Args:
        device_channel_indices: flat sequence of ints

    Returns:
        sorted np.ndarray of repeated indices (empty if all are unique)
    """
    channels = np.asarray(device_channel_indices, dtype=int).ravel()
    channels = channels[channels != UNCONNECTED_CHANNEL]
    values, counts = np.unique(channels, return_counts=True)
    return values[counts > 1]


def parse_contact_ids(probe_index, contact_ids):
    "Return contact_ids as an int array, raising MalformedContactId on the first non-integer."
    parsed = np.zeros(len(contact_ids), dtype=int)
    for contact_index, contact_id in enumerate(contact_ids):
        try:
            parsed[contact_index] = int(contact_id)
        except (ValueError, OverflowError):
            raise MalformedContactId(probe_index, contact_index, contact_id) from None
    return parsed


#################
## Probe group ##
#################


class ProbeGroup:
    """
    One or more probes recorded together, plus format/version metadata.

    Every constructor runs validate(): a ProbeGroup either comes out fully
    normalized (contact IDs, shank IDs, plane axes and device channel indices
    present on every probe, device channel indices unique apart from -1) or
    is not created at all. validate() works on the given Probe objects in place,
    and a probe belongs to one group only: pass probe.copy() to reuse it.

    Subclasses may set SPECIFICATION to pin the expected "specification" value.
    """

    SPECIFICATION = None

    def __init__(self, specification, version, probes):
        self._specification = specification
        self._version = version
        self._probes = None if probes is None else list(probes)
        self.validate()
        for probe in self._probes:
            probe._owner = weakref.ref(self)

    @classmethod
    def from_probe_group(cls, probe_group):
        """Copy-construct: deep clones every probe so that neither group sees the other's updates."""
        return cls(probe_group.specification,
                   probe_group.version,
                   [probe.copy() for probe in probe_group.probes])

    @classmethod
    def from_dict(cls, d):
        from .utils.probeinterface_json import probe_group_from_dict
        return probe_group_from_dict(d, cls=cls)

    def to_dict(self):
        from .utils.probeinterface_json import probe_group_to_dict
        return probe_group_to_dict(self)

    def __repr__(self):
        return (f"{type(self).__name__}(specification={self._specification!r}, version={self._version!r}, "
                f"{len(self._probes)} probes, {self.number_of_contacts} contacts)")

    @property
    def specification(self):
        return self._specification

    @property
    def version(self):
        return self._version

    @property
    def probes(self):
        return tuple(self._probes)

    @property
    def number_of_contacts(self):
        return sum(probe.number_of_contacts for probe in self._probes)

    def get_contact_ids(self):
        "Contact IDs of all probes, in probe order then contact order."
        contact_ids = []
        for probe in self._probes:
            contact_ids += probe.contact_ids
        return contact_ids

    def get_device_channel_indices(self):
        "Device channel indices of all probes, in probe order then contact order."
        return np.concatenate([np.asarray(probe.device_channel_indices, dtype=int) for probe in self._probes])

    def get_contacts(self):
        contacts = []
        for probe in self._probes:
            contacts += probe.get_contacts()
        return contacts

    def to_dataframe(self):
        """Tabulate every contact of the group, with a leading probe_index column."""
        dfs = []
        for probe_index, probe in enumerate(self._probes):
            df = probe.to_dataframe()
            df.insert(0, "probe_index", probe_index)
            dfs.append(df)
        return pd.concat(dfs, ignore_index=True)

    ################
    ## Validation ##
    ################

    def validate(self):
        """
        Check and normalize the group. Steps, in order:
        1) required fields are present
        2) at least one probe is listed
        3) per-contact arrays of each probe have one element per contact
        4) missing contact IDs become "0".."n-1"
        5) contact IDs forming exactly 1..N over the whole group are shifted to 0..N-1
        6) missing shank IDs become "", missing plane axes become {{1,0},{0,1}}
        7) missing device channel indices are read from the contact IDs
        8) device channel indices other than -1 are unique across the group
        """
        self._check_required_fields()

        if len(self._probes) == 0:
            raise InvalidStructure("No probes are listed, probes must be added during construction")

        logger.debug("Validating %s with %d probes", type(self).__name__, len(self._probes))

        self._check_array_lengths()
        self._set_default_contact_ids()
        self._normalize_contact_ids()
        self._set_default_shank_ids()
        self._set_default_contact_plane_axes()
        self._set_default_device_channel_indices()

        duplicates = find_duplicate_channels(self.get_device_channel_indices())
        if len(duplicates) > 0:
            raise DuplicateChannelIndex(duplicates)

    def validate_device_channel_indices(self):
        "True if no device channel index other than -1 repeats across the group."
        return len(find_duplicate_channels(self.get_device_channel_indices())) == 0

    def update_device_channel_indices(self, probe_index, device_channel_indices):
        """
        Replace the device channel indices of one probe.

        The new indices are checked against the rest of the group before they
        are assigned, so a rejected update leaves the group unchanged.

        Args:
            probe_index: position of the probe in the group
            device_channel_indices: one int per contact of that probe
        """
        if not 0 <= probe_index < len(self._probes):
            raise IndexError(f"Probe index {probe_index} is out of range for a group of {len(self._probes)} probes")

        probe = self._probes[probe_index]
        n_existing = len(probe.device_channel_indices)
        new_indices = as_channel_indices(device_channel_indices)
        n_incoming = new_indices.size if new_indices.ndim != 1 else len(new_indices)
        if new_indices.ndim != 1 or n_incoming != n_existing:
            raise LengthMismatch(probe_index, "device_channel_indices", n_existing, n_incoming,
                                 message=f"Incoming device channel indices have {n_incoming} contacts, "
                                         f"but the existing probe {probe_index} has {n_existing} contacts")

        candidate = np.concatenate([new_indices if i == probe_index else probe_i.device_channel_indices
                                    for i, probe_i in enumerate(self._probes)])
        duplicates = find_duplicate_channels(candidate)
        if len(duplicates) > 0:
            raise DuplicateChannelIndex(duplicates)

        probe._replace(device_channel_indices=new_indices)
        logger.debug("Updated device channel indices of probe %d", probe_index)

    def _check_required_fields(self):
        if self._specification is None or self._version is None or self._probes is None:
            raise InvalidStructure("Necessary fields are null, unable to validate properly "
                                   "(specification, version and probes are required)")
        if self._specification == "" or self._version == "":
            raise InvalidStructure("Specification and version must not be empty")
        if self.SPECIFICATION is not None and self._specification != self.SPECIFICATION:
            raise InvalidStructure(f"Specification is {self._specification!r}, expected {self.SPECIFICATION!r}")

        for i, probe in enumerate(self._probes):
            if not isinstance(probe, Probe):
                raise InvalidStructure(f"Probe {i} is a {type(probe).__name__}, not a Probe")
            if probe._owning_group() not in (None, self):
                raise InvalidStructure(f"Probe {i} already belongs to another ProbeGroup, pass probe.copy() instead")
            if any(probe is other for other in self._probes[:i]):
                raise InvalidStructure(f"Probe {i} is listed more than once")
            for field in REQUIRED_PROBE_KEYS:
                if getattr(probe, field) is None:
                    raise InvalidStructure(f"Required field '{field}' is missing in probe {i}")

    def _check_array_lengths(self):
        # probe_planar_contour is an outline polygon, its length is free
        for i, probe in enumerate(self._probes):
            n = probe.number_of_contacts
            for field in PER_CONTACT_FIELDS[1:]:
                values = getattr(probe, field)
                if values is not None and len(values) != n:
                    raise LengthMismatch(i, field, n, len(values))

    def _set_default_contact_ids(self):
        for probe in self._probes:
            if probe.contact_ids is None:
                probe._replace(contact_ids=default_contact_ids(probe.number_of_contacts))

    def _normalize_contact_ids(self):
        # Group-wide: shift only if the IDs of all probes together are exactly 1..N
        parsed = [parse_contact_ids(i, probe.contact_ids) for i, probe in enumerate(self._probes)]
        all_ids = np.concatenate(parsed)
        if len(all_ids) == 0:
            return

        n_total = self.number_of_contacts
        if all_ids.min() == 1 and all_ids.max() == n_total and len(np.unique(all_ids)) == len(all_ids):
            for probe, numeric_ids in zip(self._probes, parsed):
                probe._replace(contact_ids=[str(c) for c in numeric_ids - 1])
            logger.info("Contact IDs were numbered 1..%d, shifted to 0..%d", n_total, n_total - 1)

    def _set_default_shank_ids(self):
        for probe in self._probes:
            if probe.shank_ids is None:
                probe._replace(shank_ids=default_shank_ids(probe.number_of_contacts))

    def _set_default_contact_plane_axes(self):
        for probe in self._probes:
            if probe.contact_plane_axes is None:
                probe._replace(contact_plane_axes=default_contact_plane_axes(probe.number_of_contacts))

    def _set_default_device_channel_indices(self):
        # Best effort: contact IDs that are not integers leave channel 0
        for i, probe in enumerate(self._probes):
            if probe.device_channel_indices is not None:
                continue
            device_channel_indices = np.zeros(probe.number_of_contacts, dtype=int)
            for j, contact_id in enumerate(probe.contact_ids):
                try:
                    device_channel_indices[j] = int(contact_id)
                except (ValueError, OverflowError):
                    logger.warning("Contact ID %r of contact %d in probe %d is not an integer, "
                                   "device channel index left at 0", contact_id, j, i)
            probe._replace(device_channel_indices=device_channel_indices)


class ProbeInterfaceGroup(ProbeGroup):
    """ProbeGroup read from or written to a Probeinterface document."""

    SPECIFICATION = PROBEINTERFACE_SPECIFICATION

    @classmethod
    def from_probes(cls, probes, version=DEFAULT_VERSION):
        return cls(cls.SPECIFICATION, version, probes)
