"""
Pytest fixtures shared across all tests.

Provides a probe factory, sample probeinterface documents and temporary
file paths for JSON I/O tests.
"""

import pytest

from probeinterface_model.constants import DEFAULT_VERSION, SPECIFICATION
from probeinterface_model.probe import Probe, default_circle_params, default_contact_shapes


@pytest.fixture
def make_probe():
    """Factory building an unvalidated single-column probe of n circular contacts."""

    def _make_probe(n, contact_ids=None, device_channel_indices=None, shank_ids=None, x=0.0):
        return Probe(
            contact_positions=[[x, 20.0 * i] for i in range(n)],
            contact_shapes=default_contact_shapes(n, "circle"),
            contact_shape_params=default_circle_params(n, 6.0),
            contact_ids=contact_ids,
            device_channel_indices=device_channel_indices,
            shank_ids=shank_ids,
        )

    return _make_probe


@pytest.fixture
def minimal_probe_dict():
    """Probe object with the required keys only (3 contacts)."""
    return {
        "ndim": 2,
        "si_units": "um",
        "contact_positions": [[0.0, 0.0], [0.0, 20.0], [0.0, 40.0]],
        "contact_shapes": ["circle", "circle", "circle"],
        "contact_shape_params": [{"radius": 6.0}, {"radius": 6.0}, {"radius": 6.0}],
    }


@pytest.fixture
def full_probe_dict():
    """Probe object with every key present (4 contacts on 2 shanks, 1-based contact IDs)."""
    return {
        "ndim": "2",
        "si_units": "um",
        "annotations": {"name": "ASSY-37-P-2", "manufacturer": "cambridgeneurotech"},
        "contact_annotations": {"contact_annotations": ["a", "b", "c", "d"]},
        "contact_positions": [[0.0, 0.0], [0.0, 25.0], [250.0, 0.0], [250.0, 25.0]],
        "contact_plane_axes": [[[1.0, 0.0], [0.0, 1.0]]] * 4,
        "contact_shapes": ["rect", "rect", "square", "square"],
        "contact_shape_params": [{"width": 11.0, "height": 15.0}, {"width": 11.0, "height": 15.0},
                                 {"width": 12.0}, {"width": 12.0}],
        "probe_planar_contour": [[-20.0, 100.0], [-20.0, -20.0], [0.0, -60.0], [270.0, -20.0], [270.0, 100.0]],
        "device_channel_indices": [3, 2, 1, -1],
        "contact_ids": ["1", "2", "3", "4"],
        "shank_ids": ["0", "0", "1", "1"],
    }


@pytest.fixture
def probe_group_dict(full_probe_dict, minimal_probe_dict):
    """Document with two probes: a fully specified one and a minimal one."""
    minimal = dict(minimal_probe_dict)
    minimal["device_channel_indices"] = [4, 5, 6]
    return {
        "specification": SPECIFICATION,
        "version": DEFAULT_VERSION,
        "probes": [full_probe_dict, minimal],
    }


@pytest.fixture
def tmp_json_file(tmp_path):
    """Provide temporary file path for probeinterface file testing."""
    return tmp_path / "test_probe_group.json"
