################################
## Probeinterface JSON I/O ##
################################

import json
import logging
from pathlib import Path

import numpy as np

from probeinterface_model.backend import ProbeInterfaceGroup
from probeinterface_model.constants import (
    OPTIONAL_PROBE_KEYS,
    PROBE_GROUP_KEYS,
    PROBE_KEYS,
    REQUIRED_DOCUMENT_PROBE_KEYS,
    SHAPE_PARAM_KEYS,
)
from probeinterface_model.exceptions import InvalidStructure
from probeinterface_model.probe import Probe
from probeinterface_model.types import ContactAnnotations, ContactShapeParam, ProbeAnnotations

logger = logging.getLogger(__name__)


def _shape_param_from_dict(d):
    return ContactShapeParam(**{k: float(d[k]) for k in SHAPE_PARAM_KEYS if d.get(k) is not None})


def _shape_param_to_dict(param):
    return {k: getattr(param, k) for k in SHAPE_PARAM_KEYS if getattr(param, k) is not None}


def probe_from_dict(d, probe_index=0):
    """
    Build a Probe from the parsed JSON object of one probe.

    Args:
        d: dict with the probeinterface probe keys; optional keys may be absent
        probe_index: position of the probe in its document, used in error messages

    Returns:
        Probe (not yet validated, optional arrays may still be None)
    """
    if not isinstance(d, dict):
        raise InvalidStructure(f"Probe {probe_index} is not a JSON object")
    for key in REQUIRED_DOCUMENT_PROBE_KEYS:
        if d.get(key) is None:
            raise InvalidStructure(f"Required field '{key}' is missing in probe {probe_index}")

    fields = {key: d.get(key) for key in OPTIONAL_PROBE_KEYS}

    annotations = fields.pop("annotations")
    if isinstance(annotations, dict):
        annotations = ProbeAnnotations(name=annotations.get("name"),
                                       manufacturer=annotations.get("manufacturer"))
    elif annotations is not None:
        raise InvalidStructure(f"'annotations' of probe {probe_index} must be a JSON object")

    contact_annotations = fields.pop("contact_annotations")
    if isinstance(contact_annotations, dict):
        contact_annotations = contact_annotations.get("contact_annotations")
    if contact_annotations is not None:
        contact_annotations = ContactAnnotations(tuple(str(a) for a in contact_annotations))

    try:
        return Probe(
            ndim=d["ndim"],
            si_units=d["si_units"],
            annotations=annotations,
            contact_annotations=contact_annotations,
            contact_positions=d["contact_positions"],
            contact_shapes=d["contact_shapes"],
            contact_shape_params=[_shape_param_from_dict(p) for p in d["contact_shape_params"]],
            **fields,
        )
    except (AttributeError, TypeError, ValueError, OverflowError) as e:
        raise InvalidStructure(f"Probe {probe_index} could not be read: {e}") from e


def probe_to_dict(probe):
    """
    Convert a Probe to a JSON-ready dict. Fields that are None are left out.

    Args:
        probe: Probe

    Returns:
        dict with the probeinterface probe keys, in PROBE_KEYS order
    """
    d = {
        "ndim": probe.ndim.to_json(),
        "si_units": probe.si_units.value,
        "annotations": {k: v for k, v in [("name", probe.annotations.name),
                                          ("manufacturer", probe.annotations.manufacturer)] if v is not None},
    }
    if probe.contact_annotations is not None and probe.contact_annotations.annotations is not None:
        d["contact_annotations"] = {"contact_annotations": list(probe.contact_annotations.annotations)}

    for key in ["contact_positions", "contact_plane_axes", "probe_planar_contour", "device_channel_indices"]:
        values = getattr(probe, key)
        if values is not None:
            d[key] = np.asarray(values).tolist()
    d["contact_shapes"] = [shape.value for shape in probe.contact_shapes]
    d["contact_shape_params"] = [_shape_param_to_dict(p) for p in probe.contact_shape_params]
    if probe.contact_ids is not None:
        d["contact_ids"] = probe.contact_ids
    if probe.shank_ids is not None:
        d["shank_ids"] = probe.shank_ids

    return {key: d[key] for key in PROBE_KEYS if key in d}


def probe_group_from_dict(d, cls=ProbeInterfaceGroup):
    """
    Build and validate a probe group from a parsed probeinterface document.

    Args:
        d: dict with "specification", "version" and "probes"
        cls: ProbeGroup subclass to construct

    Returns:
        validated instance of cls
    """
    if not isinstance(d, dict):
        raise InvalidStructure("A probeinterface document must be a JSON object")
    for key in PROBE_GROUP_KEYS:
        if d.get(key) is None:
            raise InvalidStructure(f"Required field '{key}' is missing")
    if not isinstance(d["probes"], list):
        raise InvalidStructure("'probes' must be a list")

    probes = [probe_from_dict(p, probe_index=i) for i, p in enumerate(d["probes"])]

    return cls(d["specification"], d["version"], probes)


def probe_group_to_dict(probe_group):
    return {
        "specification": probe_group.specification,
        "version": probe_group.version,
        "probes": [probe_to_dict(probe) for probe in probe_group.probes],
    }


def parse_probeinterface(content, cls=ProbeInterfaceGroup):
    """
    Parse probeinterface JSON text.

    Args:
        content: str, contents of a .json probeinterface file
        cls: ProbeGroup subclass to construct

    Returns:
        validated instance of cls
    """
    try:
        d = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidStructure(f"Not a valid JSON document: {e}") from e

    return probe_group_from_dict(d, cls=cls)


def read_probeinterface(filepath, cls=ProbeInterfaceGroup):
    """
    Read a probeinterface file.

    Args:
        filepath: Path to .json file
        cls: ProbeGroup subclass to construct

    Returns:
        validated instance of cls
    """
    with open(filepath, "r") as f:
        content = f.read()

    probe_group = parse_probeinterface(content, cls=cls)
    logger.debug("Read %r from %s", probe_group, filepath)
    return probe_group


def write_probeinterface(probe_group, filepath="probe_group.json", indent=4):
    """
    Save a probe group to a probeinterface JSON file.

    Args:
        probe_group: validated ProbeGroup
        filepath: Output path, ".json" is appended when it has no extension
        indent: JSON indentation

    Returns:
        Path of the written file
    """
    filepath = Path(filepath)
    if filepath.suffix == "":
        filepath = filepath.with_suffix(".json")

    with open(filepath, "w") as f:
        json.dump(probe_group_to_dict(probe_group), f, indent=indent)
        f.write("\n")

    logger.info("Probeinterface file saved: %s", filepath)
    return filepath
