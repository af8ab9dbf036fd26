"""Core module for Tripwire."""
