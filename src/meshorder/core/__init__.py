"""Core mesh data structures and I/O."""

from meshorder.core.mesh import Mesh
from meshorder.core.io import load_mesh, save_mesh

__all__ = ["Mesh", "load_mesh", "save_mesh"]
