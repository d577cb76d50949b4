"""
Command-line interface for MeshOrder.

Provides commands for optimizing meshes and inspecting cache efficiency.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

from meshorder.errors import MeshOrderError

app = typer.Typer(
    name="meshorder",
    help="Triangle reordering for post-transform vertex cache efficiency"
)
console = Console()


def _load_config(config_path: Optional[Path], cache_size: Optional[int]):
    from meshorder.optimize.config import OptimizerConfig

    config = OptimizerConfig.load(config_path) if config_path else OptimizerConfig()
    return config.with_overrides(cache_size=cache_size)


def _fail(error: Exception):
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(code=1)


@app.command()
def optimize(
    input_path: Path = typer.Argument(..., help="Input mesh file (OBJ, PLY, STL)"),
    output_path: Optional[Path] = typer.Option(None, "-o", "--output", help="Output mesh file"),
    config_path: Optional[Path] = typer.Option(None, "-c", "--config", help="Optimizer config YAML"),
    cache_size: Optional[int] = typer.Option(None, "--cache-size", help="Simulated cache size"),
    timing: bool = typer.Option(False, "--timing", help="Show detailed timing information"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable verbose logging"),
):
    """
    Reorder a mesh's triangles for vertex cache reuse.
    """
    from meshorder.pipeline import OptimizationPipeline

    if verbose or timing:
        logging.basicConfig(
            level=logging.INFO if not verbose else logging.DEBUG,
            format='%(name)s - %(message)s'
        )

    console.print(f"[bold blue]Loading mesh:[/bold blue] {input_path}")

    try:
        pipeline = OptimizationPipeline(_load_config(config_path, cache_size))
        result = pipeline.process(input_path, evaluate=True, enable_timing=True)
    except (MeshOrderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if timing:
        console.print(f"\n[bold cyan]Timing Summary[/bold cyan]")
        for entry in result.timing.entries:
            status = "[green]OK[/green]" if entry.success else "[red]FAIL[/red]"
            console.print(f"  {entry.operation}: {entry.elapsed_seconds:.3f}s {status}")
        console.print(f"  [bold]Total: {result.timing.total_time():.3f}s[/bold]")

    table = Table(title="Cache Efficiency")
    table.add_column("Metric", style="cyan")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right")

    table.add_row("Hit Rate", f"{result.before.hit_rate:.1%}", f"{result.after.hit_rate:.1%}")
    table.add_row("ACMR", f"{result.before.acmr:.3f}", f"{result.after.acmr:.3f}")
    table.add_row("ATVR", f"{result.before.atvr:.3f}", f"{result.after.atvr:.3f}")
    console.print(table)

    if output_path is None:
        output_path = input_path.parent / f"{input_path.stem}_optimized.obj"

    result.mesh.to_file(output_path)
    console.print(f"[green]Saved to:[/green] {output_path}")


@app.command()
def stats(
    mesh_path: Path = typer.Argument(..., help="Mesh to inspect"),
    cache_size: int = typer.Option(32, "--cache-size", help="Simulated cache size"),
):
    """
    Show cache statistics for a mesh's triangle order as stored.
    """
    from meshorder.core.mesh import Mesh
    from meshorder.evaluation.metrics import simulate_cache

    try:
        mesh = Mesh.from_file(mesh_path)
        result = simulate_cache(mesh.faces, mesh.num_vertices, cache_size)
    except (MeshOrderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(title=f"Cache Statistics: {mesh_path.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Vertices", str(mesh.num_vertices))
    table.add_row("Triangles", str(mesh.num_faces))
    table.add_row("Cache Size", str(cache_size))
    table.add_row("Hits", str(result.hits))
    table.add_row("Misses", str(result.misses))
    table.add_row("Hit Rate", f"{result.hit_rate:.1%}")
    table.add_row("ACMR", f"{result.acmr:.3f}")
    table.add_row("ATVR", f"{result.atvr:.3f}")

    console.print(table)


@app.command()
def compare(
    mesh_path: Path = typer.Argument(..., help="Mesh to compare orders for"),
    config_path: Optional[Path] = typer.Option(None, "-c", "--config", help="Optimizer config YAML"),
    cache_size: Optional[int] = typer.Option(None, "--cache-size", help="Simulated cache size"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the shuffled order"),
):
    """
    Compare original, optimized and shuffled triangle orders.
    """
    from meshorder.core.mesh import Mesh
    from meshorder.evaluation.metrics import compare_orders

    try:
        config = _load_config(config_path, cache_size)
        mesh = Mesh.from_file(mesh_path)
        result = compare_orders(mesh.faces, mesh.num_vertices, config=config, seed=seed)
    except (MeshOrderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(title=f"Triangle Orders: {mesh_path.name}")
    table.add_column("Order", style="cyan")
    table.add_column("Hit Rate", justify="right")
    table.add_column("ACMR", justify="right")
    table.add_column("ATVR", justify="right")

    for name, s in (("original", result.original),
                    ("optimized", result.optimized),
                    ("shuffled", result.shuffled)):
        table.add_row(name, f"{s.hit_rate:.1%}", f"{s.acmr:.3f}", f"{s.atvr:.3f}")

    console.print(table)

    diff = result.improvement
    diff_style = "green" if diff > 0 else "red" if diff < 0 else "white"
    console.print(f"ACMR reduction: [{diff_style}]{diff:+.1%}[/{diff_style}]")


@app.command()
def gen_config(
    output_path: Path = typer.Option("config.yaml", "-o", "--output", help="Output config file"),
):
    """
    Generate a default optimizer configuration file.
    """
    from meshorder.optimize.config import create_default_config

    config = create_default_config()
    config.save(output_path)

    console.print(f"[green]Config saved to:[/green] {output_path}")


@app.command()
def gen_test_meshes(
    output_dir: Path = typer.Option("test_meshes", "-o", "--output", help="Output directory"),
):
    """
    Generate test meshes for experimentation.
    """
    from meshorder.test_meshes import save_test_meshes

    console.print(f"[bold blue]Generating test meshes to:[/bold blue] {output_dir}")
    save_test_meshes(output_dir)
    console.print("[green]Done![/green]")


if __name__ == "__main__":
    app()
