"""Click CLI commands for ReefBuilder."""

import logging
import random

import click

from .biome import BiomeField
from .builder import ReefBuilder
from .constants import BIOME_SCALE, DEFAULT_SEED, LOG_FORMAT
from .creatures import RepulsorRegistry, probe, spawn, steer
from .export import write_biome_map
from .models import CORAL_SHAPES, CoralParameters, KelpParameters

logger = logging.getLogger(__name__)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """ReefBuilder CLI for growing coral and kelp meshes."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format=LOG_FORMAT)


def _run(builder: ReefBuilder, output: str, weld: bool):
    """Build, optionally weld, and export."""
    try:
        builder.build()
        if weld:
            builder.weld(smooth=True, debug=True)
        path = builder.export(output)
        click.echo(f"{builder.kind}: {builder.segment_count} segments, "
                   f"{builder.mesh.vertex_count} vertices -> {path}")
    except Exception as e:
        logger.error(f"Error building {builder.kind}: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.option('--iterations', '-i', default=3, show_default=True, help='Recursion depth')
@click.option('--branches', '-b', default=4, show_default=True,
              help='Branches per node (at most 5)')
@click.option('--seed', type=int, default=DEFAULT_SEED, help='Random seed')
@click.option('--shape', type=click.Choice(CORAL_SHAPES), default='cube',
              show_default=True, help='Segment primitive')
@click.option('--weld/--no-weld', default=False, help='Merge duplicate vertices')
@click.option('--output', '-o', default='coral.glb', help='Output mesh file path')
def coral(iterations: int, branches: int, shape: str, seed, weld: bool, output: str):
    """Grow a coral (discrete-face branching)."""
    try:
        params = CoralParameters(iterations=iterations, branches=branches,
                                 shape=shape, seed=seed)
    except ValueError as e:
        raise click.BadParameter(str(e))
    _run(ReefBuilder('coral', params), output, weld)


@cli.command()
@click.option('--iterations', '-i', default=3, show_default=True, help='Number of stem segments')
@click.option('--leaves', '-l', default=5, show_default=True, help='Leaves per stem segment')
@click.option('--seed', type=int, default=DEFAULT_SEED, help='Random seed')
@click.option('--weld/--no-weld', default=False, help='Merge duplicate vertices')
@click.option('--output', '-o', default='kelp.glb', help='Output mesh file path')
def kelp(iterations: int, leaves: int, seed, weld: bool, output: str):
    """Grow a kelp strand (leaf fans along a wandering stem)."""
    try:
        params = KelpParameters(iterations=iterations, number_of_leaves=leaves, seed=seed)
    except ValueError as e:
        raise click.BadParameter(str(e))
    _run(ReefBuilder('kelp', params), output, weld)


# Negative coordinates would otherwise be parsed as options
@cli.command(context_settings={'ignore_unknown_options': True})
@click.argument('x', type=float)
@click.argument('y', type=float)
@click.argument('z', type=float)
@click.option('--scale', '-s', default=BIOME_SCALE, show_default=True,
              help='World units per noise unit')
def biome(x: float, y: float, z: float, scale: float):
    """Print the biome id at a world position."""
    result = BiomeField(scale=scale).sample((x, y, z))
    click.echo(f"{result.name} ({int(result)})")


@cli.command('biome-map')
@click.option('--size', default=128, show_default=True, help='Image width and height in pixels')
@click.option('--step', default=1.0, show_default=True, help='World units per pixel')
@click.option('--y', 'height', default=0.0, show_default=True, help='Sampling height')
@click.option('--scale', '-s', default=BIOME_SCALE, show_default=True,
              help='World units per noise unit')
@click.option('--output', '-o', default='biomes.png', help='Output PNG path')
def biome_map(size: int, step: float, height: float, scale: float, output: str):
    """Render a top-down biome map PNG."""
    path = write_biome_map(BiomeField(scale=scale), output, size=size,
                           step=step, y=height)
    click.echo(f"Biome map: {path}")


@cli.command()
@click.option('--steps', default=100, show_default=True, help='Simulation steps')
@click.option('--dt', default=0.1, show_default=True, help='Seconds per step')
@click.option('--seed', type=int, default=DEFAULT_SEED, help='Random seed')
@click.option('--repulsor', '-r', 'repulsors', type=(float, float, float), multiple=True,
              help='Repulsor position X Y Z (repeatable)')
def swim(steps: int, dt: float, seed, repulsors):
    """Steer one creature from the origin around repulsors."""
    rng = random.Random(seed)
    registry = RepulsorRegistry(repulsors)
    state = spawn((0.0, 0.0, 0.0), rng)
    for _ in range(steps):
        state = steer(state, dt, rng, registry=registry)
    x, y, z = state.position
    hit = probe(state.position, registry)
    click.echo(f"position ({x:.2f}, {y:.2f}, {z:.2f}), probe: {hit or 'clear'}")


if __name__ == '__main__':
    cli()
