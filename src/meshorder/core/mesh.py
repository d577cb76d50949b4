"""
Core triangle mesh container.

The optimizer only ever reorders faces. Vertex arrays pass through
untouched, and face order read from disk is preserved exactly so the
before/after comparison is meaningful.

OBJ files keep everything besides the face list (positions, texture
coordinates, normals, material library references) as the original
text lines, and each face keeps its original v/vt/vn corner tokens, so
writing an optimized OBJ changes nothing but the order of its faces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union
import numpy as np

logger = logging.getLogger("meshorder.io")

# Statements that set the context for the faces that follow them
STATE_KEYWORDS = ("o", "g", "usemtl", "s")


@dataclass
class ObjLayout:
    """
    Non-face content of an OBJ file, kept for lossless rewriting.

    Attributes:
        lines: Every non-face, non-state statement, verbatim and in file order
        corners: Per-triangle corner tokens with absolute 1-based indices
        states: Distinct o/g/usemtl/s contexts, each a tuple of statements
        face_states: Per-triangle index into states
    """
    lines: list[str]
    corners: list[tuple[str, str, str]]
    states: list[tuple[str, ...]]
    face_states: list[int]

    def permuted(self, order: Sequence[int]) -> ObjLayout:
        """Layout with face entries rearranged to follow order."""
        return ObjLayout(
            lines=list(self.lines),
            corners=[self.corners[i] for i in order],
            states=list(self.states),
            face_states=[self.face_states[i] for i in order],
        )


def _absolute_token(token: str, counts: tuple[int, int, int]) -> str:
    """Rewrite a v/vt/vn corner token with positive 1-based indices."""
    parts = token.split('/')
    for slot, value in enumerate(parts[:3]):
        if not value:
            continue
        index = int(value)
        # Negative indices count back from the latest element of that kind
        if index < 0:
            index = counts[slot] + index + 1
        parts[slot] = str(index)
    return '/'.join(parts)


@dataclass
class Mesh:
    """
    Triangle mesh consumed and produced by the optimizer.

    Attributes:
        vertices: Nx3 array of vertex positions
        faces: Mx3 array of triangle vertex indices
        name: Optional mesh identifier
        metadata: Additional mesh properties
        obj: Original OBJ content when loaded from an OBJ file
    """
    vertices: np.ndarray
    faces: np.ndarray
    name: str = "unnamed"
    metadata: dict = field(default_factory=dict)
    obj: Optional[ObjLayout] = None

    def __post_init__(self):
        """Validate and normalize mesh data."""
        self.vertices = np.asarray(self.vertices, dtype=np.float64)
        self.faces = np.asarray(self.faces, dtype=np.int64)

        if self.faces.size == 0:
            self.faces = self.faces.reshape(0, 3)

        if self.vertices.ndim != 2 or self.vertices.shape[1] != 3:
            raise ValueError(f"Vertices must be Nx3, got shape {self.vertices.shape}")

        if self.faces.ndim != 2 or self.faces.shape[1] != 3:
            raise ValueError(f"Faces must be Mx3, got shape {self.faces.shape}")

        if self.obj is not None and len(self.obj.corners) != len(self.faces):
            raise ValueError(f"OBJ layout has {len(self.obj.corners)} faces, "
                             f"mesh has {len(self.faces)}")

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    @property
    def indices(self) -> np.ndarray:
        """Flat index stream, three entries per triangle."""
        return self.faces.reshape(-1)

    def with_faces(self, faces: np.ndarray) -> Mesh:
        """Copy of this mesh with a replaced face array.

        The new faces are unrelated to the old ones, so any OBJ layout
        is dropped. Use reordered() to permute existing faces.
        """
        return Mesh(
            vertices=self.vertices.copy(),
            faces=np.asarray(faces, dtype=np.int64).reshape(-1, 3),
            name=self.name,
            metadata=self.metadata.copy()
        )

    def reordered(self, order: Sequence[int]) -> Mesh:
        """Copy of this mesh with faces taken in the given order.

        Per-face OBJ data (texture and normal tokens, materials) moves
        with its face.
        """
        order = np.asarray(order, dtype=np.int64)
        if sorted(order.tolist()) != list(range(self.num_faces)):
            raise ValueError("Face order must be a permutation of all faces")

        return Mesh(
            vertices=self.vertices.copy(),
            faces=self.faces[order],
            name=self.name,
            metadata=self.metadata.copy(),
            obj=self.obj.permuted(order.tolist()) if self.obj is not None else None,
        )

    def face_groups(self) -> list[np.ndarray]:
        """
        Face ids grouped by OBJ material/group context.

        Groups are listed in order of first appearance and keep file order
        inside each group. Meshes without an OBJ layout form one group.
        """
        if self.obj is None or len(self.obj.states) <= 1:
            return [np.arange(self.num_faces, dtype=np.int64)]

        groups: dict[int, list[int]] = {}
        for face, state in enumerate(self.obj.face_states):
            groups.setdefault(state, []).append(face)
        return [np.array(ids, dtype=np.int64) for ids in groups.values()]

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> Mesh:
        """Load mesh from file.

        OBJ files are read directly so face order matches the file.
        Other formats go through trimesh with processing disabled.
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Mesh file not found: {path}")

        if path.suffix.lower() == '.obj':
            return cls._load_obj(path)

        from meshorder.core.io import load_mesh
        return load_mesh(path)

    @classmethod
    def _load_obj(cls, path: Path) -> Mesh:
        """Load an OBJ file, fan-triangulating polygons."""
        vertices = []
        faces = []
        lines = []
        corners = []
        face_states = []
        state_ids: dict[tuple[str, ...], int] = {}
        context: dict[str, str] = {}
        vt_count = 0
        vn_count = 0
        polygons = 0

        with open(path, 'r') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue

                parts = line.split()
                keyword = parts[0]

                if keyword == 'f':
                    counts = (len(vertices), vt_count, vn_count)
                    tokens = [_absolute_token(p, counts) for p in parts[1:]]
                    if len(tokens) < 3:
                        continue
                    if len(tokens) > 3:
                        polygons += 1

                    state = tuple(context[k] for k in STATE_KEYWORDS if k in context)
                    state_id = state_ids.setdefault(state, len(state_ids))

                    face_verts = [int(t.split('/')[0]) - 1 for t in tokens]
                    # Fan triangulation
                    for i in range(1, len(tokens) - 1):
                        faces.append([face_verts[0], face_verts[i], face_verts[i + 1]])
                        corners.append((tokens[0], tokens[i], tokens[i + 1]))
                        face_states.append(state_id)
                    continue

                if keyword in STATE_KEYWORDS:
                    context[keyword] = line
                    continue

                if keyword == 'v' and len(parts) >= 4:
                    vertices.append([float(parts[1]), float(parts[2]), float(parts[3])])
                elif keyword == 'vt':
                    vt_count += 1
                elif keyword == 'vn':
                    vn_count += 1
                lines.append(line)

        if not vertices or not faces:
            raise ValueError(f"No valid mesh data found in {path}")

        if polygons:
            logger.warning(f"{polygons} polygon faces found in {path}, triangulating")

        layout = ObjLayout(
            lines=lines,
            corners=corners,
            states=list(state_ids),
            face_states=face_states,
        )

        mesh = cls(
            vertices=np.array(vertices, dtype=np.float64),
            faces=np.array(faces, dtype=np.int64),
            name=path.stem,
            metadata={"source_file": str(path), "loader": "obj"},
            obj=layout,
        )
        return mesh

    def to_file(self, path: Union[str, Path]) -> None:
        """Save mesh to file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if path.suffix.lower() == '.obj':
            self._export_obj(path)
        else:
            from meshorder.core.io import save_mesh
            save_mesh(self, path)

    def _export_obj(self, path: Path) -> None:
        """Export to OBJ format, faces in current order."""
        with open(path, 'w') as f:
            f.write(f"# MeshOrder export: {self.name}\n")
            f.write(f"# Vertices: {self.num_vertices}, Faces: {self.num_faces}\n\n")

            if self.obj is None:
                for v in self.vertices:
                    f.write(f"v {float(v[0])!r} {float(v[1])!r} {float(v[2])!r}\n")
                f.write("\n")
                for face in self.faces:
                    indices = " ".join(str(i + 1) for i in face)
                    f.write(f"f {indices}\n")
                return

            for line in self.obj.lines:
                f.write(f"{line}\n")
            f.write("\n")

            current = None
            for corner, state in zip(self.obj.corners, self.obj.face_states):
                if state != current:
                    for statement in self.obj.states[state]:
                        f.write(f"{statement}\n")
                    current = state
                f.write(f"f {' '.join(corner)}\n")

    def to_trimesh(self):
        """Convert to trimesh object without merging or reordering."""
        import trimesh
        return trimesh.Trimesh(vertices=self.vertices, faces=self.faces, process=False)

    def __repr__(self) -> str:
        return f"Mesh('{self.name}', {self.num_vertices} verts, {self.num_faces} triangles)"
