"""
Probeinterface model

A Python package modelling Probeinterface probe-group documents: probe geometry,
contact shapes and channel mappings, with the validation and normalization
applied whenever a probe group is built.
"""

from .backend import *
from .exceptions import DuplicateChannelIndex, InvalidStructure, LengthMismatch, MalformedContactId, ProbeInterfaceError
from .probe import Probe
from .types import Contact, ContactAnnotations, ContactShape, ContactShapeParam, ProbeAnnotations, ProbeNdim, ProbeSiUnits
from .utils.probeinterface_json import parse_probeinterface, read_probeinterface, write_probeinterface

__version__ = "0.1.0"
