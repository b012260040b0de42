"""I/O utilities for building frame systems from robot description files."""

from .urdf_parser import load_urdf

__all__ = ["load_urdf"]
