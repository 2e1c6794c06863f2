"""
Maestro - alias resolution for monorepos

Maestro resolves a graph of named configuration fragments (aliases) into a
single merged basis, letting active profiles choose between variants of a
dependency (for instance a local module or its released artifact).
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
