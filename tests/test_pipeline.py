"""Tests for the optimization pipeline."""

import pytest

from meshorder.errors import ConfigurationError
from meshorder.optimize.config import OptimizerConfig
from meshorder.pipeline import OptimizationPipeline
from meshorder.test_meshes import create_disconnected, create_fan, create_grid, create_sphere


class TestPipeline:
    """Test single and batch processing."""

    def test_process_mesh(self):
        mesh = create_grid(rows=8, cols=64)
        result = OptimizationPipeline().process(mesh)

        assert result.mesh.num_faces == mesh.num_faces
        assert result.before is not None
        assert result.after is not None
        assert result.after.acmr < result.before.acmr
        assert [e.operation for e in result.timing.entries] == [
            "evaluate_before", "optimize", "evaluate_after"
        ]

    def test_process_path(self, tmp_path):
        path = tmp_path / "sphere.obj"
        create_sphere(subdivisions=2).to_file(path)

        result = OptimizationPipeline(OptimizerConfig(cache_size=16)).process(path)
        assert result.mesh.name == "sphere"
        assert result.after.cache_size == 16
        assert result.timing.entries[0].operation == "load"
        assert result.to_dict()["triangles"] == result.mesh.num_faces

    def test_no_evaluation(self):
        result = OptimizationPipeline().process(create_fan(), evaluate=False, enable_timing=False)
        assert result.before is None
        assert result.after is None
        assert result.timing.entries == []

    def test_bad_config(self):
        with pytest.raises(ConfigurationError):
            OptimizationPipeline(OptimizerConfig(cache_size=0))

    def test_batch_keeps_order(self):
        meshes = [create_sphere(subdivisions=2), create_fan(segments=6), create_disconnected(3)]
        pipeline = OptimizationPipeline()

        results = pipeline.process_batch(meshes, max_workers=3)
        assert [r.mesh.name for r in results] == ["sphere", "fan", "disconnected"]

        for mesh, result in zip(meshes, results):
            single = pipeline.process(mesh)
            assert (single.mesh.faces == result.mesh.faces).all()

    def test_batch_empty(self):
        assert OptimizationPipeline().process_batch([]) == []
