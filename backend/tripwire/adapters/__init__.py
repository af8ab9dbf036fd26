"""Infrastructure adapters.

Adapters implement protocols defined in core/protocols/.
Each adapter wraps a host facility (the asyncio loop clock, etc.).
"""
