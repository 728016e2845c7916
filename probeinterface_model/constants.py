######################
## Global variables ##
######################

# Format identifier expected in the "specification" field
SPECIFICATION = "probeinterface"

# Version written when a group is built from probes alone
DEFAULT_VERSION = "0.2.21"

# Device channel index of a contact that is not wired or not recorded.
# May repeat freely across a probe group.
UNCONNECTED_CHANNEL = -1

# Plane axes of a contact lying flat in the probe plane: {{1,0},{0,1}}
CANONICAL_PLANE_AXES = ((1.0, 0.0), (0.0, 1.0))

# JSON keys
PROBE_GROUP_KEYS = ["specification", "version", "probes"]

REQUIRED_PROBE_KEYS = [
    "contact_positions",
    "contact_shapes",
    "contact_shape_params",
]

# "ndim" and "si_units" are required in documents but default when building a Probe in code
REQUIRED_DOCUMENT_PROBE_KEYS = ["ndim", "si_units"] + REQUIRED_PROBE_KEYS

OPTIONAL_PROBE_KEYS = [
    "annotations",
    "contact_annotations",
    "contact_plane_axes",
    "probe_planar_contour",
    "device_channel_indices",
    "contact_ids",
    "shank_ids",
]

# Per-contact arrays, in the order their lengths are checked
PER_CONTACT_FIELDS = [
    "contact_positions",
    "contact_plane_axes",
    "contact_shape_params",
    "contact_shapes",
    "contact_ids",
    "shank_ids",
    "device_channel_indices",
]

SHAPE_PARAM_KEYS = ["radius", "width", "height"]

# Key order of a written probe
PROBE_KEYS = [
    "ndim",
    "si_units",
    "annotations",
    "contact_annotations",
    "contact_positions",
    "contact_plane_axes",
    "contact_shapes",
    "contact_shape_params",
    "probe_planar_contour",
    "device_channel_indices",
    "contact_ids",
    "shank_ids",
]
