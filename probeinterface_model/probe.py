#############
## Imports ##
#############

import numbers

import numpy as np
import pandas as pd

from .constants import CANONICAL_PLANE_AXES
from .exceptions import InvalidStructure
from .types import (
    Contact,
    ContactAnnotations,
    ContactShape,
    ContactShapeParam,
    ProbeAnnotations,
    ProbeNdim,
    ProbeSiUnits,
)

########################
## Default generators ##
########################


def default_contact_shapes(number_of_contacts, contact_shape):
    """Return number_of_contacts copies of contact_shape."""
    contact_shape = ContactShape.from_value(contact_shape)
    return tuple(contact_shape for _ in range(number_of_contacts))


def default_contact_plane_axes(number_of_contacts):
    """Return number_of_contacts copies of the canonical axes {{1,0},{0,1}}, shape (n, 2, 2)."""
    return np.tile(np.array(CANONICAL_PLANE_AXES, dtype=float), (number_of_contacts, 1, 1))


def default_circle_params(number_of_contacts, radius):
    return tuple(ContactShapeParam(radius=radius) for _ in range(number_of_contacts))


def default_square_params(number_of_contacts, width):
    return tuple(ContactShapeParam(width=width) for _ in range(number_of_contacts))


def default_rect_params(number_of_contacts, width, height):
    return tuple(ContactShapeParam(width=width, height=height) for _ in range(number_of_contacts))


def default_device_channel_indices(number_of_contacts, offset=0):
    """Return the channel sequence offset, offset+1, ..., offset+number_of_contacts-1."""
    return np.arange(offset, offset + number_of_contacts, dtype=int)


def default_contact_ids(number_of_contacts):
    """Return the stringified indices "0", "1", ..., str(number_of_contacts-1)."""
    return [str(i) for i in range(number_of_contacts)]


def default_shank_ids(number_of_contacts):
    return ["" for _ in range(number_of_contacts)]


###########
## Probe ##
###########


def as_channel_indices(values):
    """
    Convert device channel indices to an int array without rounding.

    Integral floats such as 3.0 are accepted; 0.9, NaN, strings, bools and
    values outside the int64 range raise InvalidStructure.
    """
    array = np.asarray(values)
    if array.size > 0 and not np.issubdtype(array.dtype, np.integer):
        if np.issubdtype(array.dtype, np.floating):
            integral = bool(np.all(np.isfinite(array))) and bool(np.all(array == np.round(array)))
        elif array.dtype == object:
            integral = all(isinstance(v, numbers.Integral) and not isinstance(v, bool) for v in array.ravel())
        else:
            integral = False
        if not integral:
            raise InvalidStructure(f"Device channel indices must be integers, got {np.asarray(values).tolist()}")
    try:
        return np.array(array, dtype=int)
    except OverflowError:
        raise InvalidStructure("Device channel indices do not fit in a 64-bit integer") from None


def _frozen_array(values, dtype):
    if values is None:
        return None
    array = as_channel_indices(values) if dtype is int else np.array(values, dtype=dtype)
    array.flags.writeable = False
    return array


def _as_shape_param(param):
    if isinstance(param, ContactShapeParam):
        return param
    return ContactShapeParam(**{k: v for k, v in dict(param).items() if v is not None})


class Probe:
    """
    One physical probe: per-contact parallel arrays plus scalar metadata.

    Every per-contact array holds one element per entry of contact_positions,
    whose length is the canonical contact count of the probe. Optional arrays
    left as None are filled by the owning ProbeGroup when it validates.

    Numeric arrays are stored read-only; arrays are replaced, never edited.
    """

    # Aliases so the generators read as Probe.default_*(...)
    default_contact_shapes = staticmethod(default_contact_shapes)
    default_contact_plane_axes = staticmethod(default_contact_plane_axes)
    default_circle_params = staticmethod(default_circle_params)
    default_square_params = staticmethod(default_square_params)
    default_rect_params = staticmethod(default_rect_params)
    default_device_channel_indices = staticmethod(default_device_channel_indices)
    default_contact_ids = staticmethod(default_contact_ids)
    default_shank_ids = staticmethod(default_shank_ids)

    def __init__(self,
                 contact_positions,
                 contact_shapes,
                 contact_shape_params,
                 ndim=ProbeNdim.TWO,
                 si_units=ProbeSiUnits.UM,
                 annotations=None,
                 contact_annotations=None,
                 contact_plane_axes=None,
                 probe_planar_contour=None,
                 device_channel_indices=None,
                 contact_ids=None,
                 shank_ids=None):
        self.ndim = ProbeNdim.from_value(ndim)
        self.si_units = ProbeSiUnits.from_value(si_units)
        self.annotations = annotations if annotations is not None else ProbeAnnotations()
        if contact_annotations is not None and not isinstance(contact_annotations, ContactAnnotations):
            contact_annotations = ContactAnnotations(tuple(contact_annotations))
        self.contact_annotations = contact_annotations

        self.contact_positions = _frozen_array(contact_positions, float)
        self.contact_shapes = None if contact_shapes is None else \
            tuple(ContactShape.from_value(s) for s in contact_shapes)
        self.contact_shape_params = None if contact_shape_params is None else \
            tuple(_as_shape_param(p) for p in contact_shape_params)
        self.probe_planar_contour = _frozen_array(probe_planar_contour, float)

        self._contact_plane_axes = _frozen_array(contact_plane_axes, float)
        self._device_channel_indices = _frozen_array(device_channel_indices, int)
        self._contact_ids = None if contact_ids is None else [str(c) for c in contact_ids]
        self._shank_ids = None if shank_ids is None else [str(s) for s in shank_ids]
        # weak reference to the ProbeGroup that validated this probe
        self._owner = None

    def __repr__(self):
        name = self.annotations.name or "unnamed"
        return f"Probe({name!r}, {self.number_of_contacts} contacts, ndim={int(self.ndim)}, si_units={self.si_units.value!r})"

    @property
    def number_of_contacts(self):
        if self.contact_positions is None:
            return 0
        return len(self.contact_positions)

    # Arrays below are defaulted by ProbeGroup.validate and are read-only to callers

    @property
    def contact_plane_axes(self):
        return self._contact_plane_axes

    @property
    def device_channel_indices(self):
        return self._device_channel_indices

    @property
    def contact_ids(self):
        return None if self._contact_ids is None else list(self._contact_ids)

    @property
    def shank_ids(self):
        return None if self._shank_ids is None else list(self._shank_ids)

    def _owning_group(self):
        return None if self._owner is None else self._owner()

    def _replace(self, contact_plane_axes=None, device_channel_indices=None, contact_ids=None, shank_ids=None):
        "Assign freshly built arrays. Used by the owning ProbeGroup only."
        if contact_plane_axes is not None:
            self._contact_plane_axes = _frozen_array(contact_plane_axes, float)
        if device_channel_indices is not None:
            self._device_channel_indices = _frozen_array(device_channel_indices, int)
        if contact_ids is not None:
            self._contact_ids = [str(c) for c in contact_ids]
        if shank_ids is not None:
            self._shank_ids = [str(s) for s in shank_ids]

    def copy(self):
        """Return a deep clone sharing no mutable state with this probe."""
        # the constructor copies every array it is given
        return Probe(
            contact_positions=self.contact_positions,
            contact_shapes=self.contact_shapes,
            contact_shape_params=self.contact_shape_params,
            ndim=self.ndim,
            si_units=self.si_units,
            annotations=self.annotations,
            contact_annotations=self.contact_annotations,
            contact_plane_axes=self._contact_plane_axes,
            probe_planar_contour=self.probe_planar_contour,
            device_channel_indices=self._device_channel_indices,
            contact_ids=self.contact_ids,
            shank_ids=self.shank_ids,
        )

    def get_contact(self, index):
        """
        Build the Contact at position index by reading each parallel array.

        Args:
            index: Contact position, 0 <= index < number_of_contacts

        Returns:
            Contact
        """
        n = self.number_of_contacts
        if not 0 <= index < n:
            raise IndexError(f"Contact index {index} is out of range for a probe with {n} contacts")
        if self._device_channel_indices is None or self._contact_ids is None or self._shank_ids is None:
            raise InvalidStructure(
                "Probe has no device channel indices, contact IDs or shank IDs yet; "
                "add it to a ProbeGroup to fill in the defaults")

        return Contact(
            pos_x=float(self.contact_positions[index][0]),
            pos_y=float(self.contact_positions[index][1]),
            shape=self.contact_shapes[index],
            shape_params=self.contact_shape_params[index],
            device_id=int(self._device_channel_indices[index]),
            contact_id=self._contact_ids[index],
            shank_id=self._shank_ids[index],
            index=index,
        )

    def get_contacts(self):
        return [self.get_contact(i) for i in range(self.number_of_contacts)]

    def to_dataframe(self):
        """
        Tabulate the probe, one row per contact.

        Returns:
            pd.DataFrame with columns x, y, contact_shapes, radius, width, height,
            device_channel_indices, contact_ids, shank_ids
        """
        contacts = self.get_contacts()
        df = pd.DataFrame({
            "x": [c.pos_x for c in contacts],
            "y": [c.pos_y for c in contacts],
            "contact_shapes": [c.shape.value for c in contacts],
            "radius": [c.shape_params.radius for c in contacts],
            "width": [c.shape_params.width for c in contacts],
            "height": [c.shape_params.height for c in contacts],
            "device_channel_indices": [c.device_id for c in contacts],
            "contact_ids": [c.contact_id for c in contacts],
            "shank_ids": [c.shank_id for c in contacts],
        })
        # all-None shape columns come out as object dtype
        for column in ["radius", "width", "height"]:
            df[column] = df[column].astype(float)
        df["device_channel_indices"] = df["device_channel_indices"].astype(int)
        return df
