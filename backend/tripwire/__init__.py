"""Tripwire: in-process event tracking and trigger dispatch."""
