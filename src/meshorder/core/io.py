"""
Mesh I/O utilities.

Non-OBJ formats (PLY, STL, OFF, GLB, GLTF) are handled by trimesh with
processing disabled, so vertex order and face order survive the load.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union
import numpy as np

from meshorder.core.mesh import Mesh

logger = logging.getLogger("meshorder.io")


def load_mesh(filepath: Union[str, Path]) -> Mesh:
    """
    Load a mesh from file.

    Args:
        filepath: Path to mesh file

    Returns:
        Loaded Mesh object
    """
    import trimesh

    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Mesh file not found: {filepath}")

    if filepath.suffix.lower() == '.obj':
        return Mesh.from_file(filepath)

    tm = trimesh.load(str(filepath), process=False)

    # Handle scene vs single mesh
    if isinstance(tm, trimesh.Scene):
        meshes = list(tm.geometry.values())
        if not meshes:
            raise ValueError(f"No meshes found in {filepath}")

        if len(meshes) == 1:
            tm = meshes[0]
        else:
            logger.info(f"Concatenating {len(meshes)} geometries from {filepath}")
            tm = trimesh.util.concatenate(meshes)

    return Mesh(
        vertices=np.asarray(tm.vertices),
        faces=np.asarray(tm.faces),
        name=filepath.stem,
        metadata={"source_file": str(filepath), "loader": "trimesh"}
    )


def save_mesh(mesh: Mesh, filepath: Union[str, Path]) -> None:
    """
    Save mesh to file.

    Args:
        mesh: Mesh to save
        filepath: Output path (format determined by extension)
    """
    filepath = Path(filepath)

    if filepath.suffix.lower() == '.obj':
        mesh.to_file(filepath)
        return

    filepath.parent.mkdir(parents=True, exist_ok=True)
    mesh.to_trimesh().export(str(filepath))
