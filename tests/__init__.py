"""
Test suite for the probeinterface model.

This test suite validates the probe group validation engine, the Probe
container and its default generators, and probeinterface JSON I/O.
"""
