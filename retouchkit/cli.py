"""
RetouchKit Command Line Interface

Applies the raster adjustment, crop and resize operations to image files.
Every output is written as PNG.
"""

import sys
import click
import logging
from typing import Optional

from .config import load_config
from .exceptions import RetouchError
from .io.codec import load_raster, save_raster
from .processing.models import AdjustmentParams, Rect
from .processing.adjustment_pipeline import AdjustmentPipeline
from .processing.geometry.crop import CropExtractor
from .processing.geometry.resize import Resizer
from .utils.logging import setup_logging_from_config

logger = logging.getLogger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, config: Optional[str] = None, verbose: bool = False, quiet: bool = False):
    """
    RetouchKit - local raster adjustments

    Rotate, tone map, sharpen, crop and resize images from the command line.
    """
    # Ensure context object exists
    if ctx.obj is None:
        ctx.obj = {}

    ctx.obj['config'] = load_config(config)

    # Log to stderr so command output stays on stdout
    setup_logging_from_config(ctx.obj['config'], stream=sys.stderr)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif quiet:
        logging.getLogger().setLevel(logging.ERROR)

    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@main.command()
@click.argument('input_path', metavar='INPUT', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_path', metavar='OUTPUT', type=click.Path(dir_okay=False))
@click.option('--brightness', '-b', type=float, default=100.0, show_default=True,
              help='Brightness (0-200, 100 is neutral)')
@click.option('--contrast', type=float, default=100.0, show_default=True,
              help='Contrast (0-200, 100 is neutral)')
@click.option('--gamma', '-g', type=float, default=100.0, show_default=True,
              help='Gamma (10-300, 100 is neutral)')
@click.option('--sharpness', '-s', type=float, default=0.0, show_default=True,
              help='Sharpness (0-300)')
@click.option('--angle', '-a', type=float, default=0.0, show_default=True,
              help='Clockwise rotation in degrees (-180 to 180)')
@click.pass_context
def adjust(ctx, input_path: str, output_path: str, brightness: float, contrast: float,
           gamma: float, sharpness: float, angle: float):
    """
    Apply brightness, contrast, gamma, sharpness and rotation.

    INPUT: Image file to adjust
    OUTPUT: Destination PNG file
    """
    config = ctx.obj.get('config', {})

    try:
        params = AdjustmentParams(
            brightness=brightness,
            contrast=contrast,
            gamma=gamma,
            sharpness=sharpness,
            angle=angle,
        )
        raster = load_raster(input_path)
        result = AdjustmentPipeline.from_config(config).adjust(raster, params)
        save_raster(result, output_path)
    except (RetouchError, OSError) as e:
        raise click.ClickException(str(e))

    if not ctx.obj.get('quiet'):
        click.echo(f"✅ Adjusted {raster.width}x{raster.height} -> "
                   f"{result.width}x{result.height}: {output_path}")


@main.command()
@click.argument('input_path', metavar='INPUT', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_path', metavar='OUTPUT', type=click.Path(dir_okay=False))
@click.option('--x', 'x', type=float, required=True, help='Left edge in display pixels')
@click.option('--y', 'y', type=float, required=True, help='Top edge in display pixels')
@click.option('--width', '-w', type=float, required=True, help='Width in display pixels')
@click.option('--height', '-h', type=float, required=True, help='Height in display pixels')
@click.option('--scale-x', type=float, default=1.0, show_default=True,
              help='Natural width / displayed width')
@click.option('--scale-y', type=float, default=1.0, show_default=True,
              help='Natural height / displayed height')
@click.pass_context
def crop(ctx, input_path: str, output_path: str, x: float, y: float, width: float,
         height: float, scale_x: float, scale_y: float):
    """
    Crop a rectangle given in displayed-image coordinates.

    INPUT: Image file to crop
    OUTPUT: Destination PNG file
    """
    try:
        raster = load_raster(input_path)
        result = CropExtractor().crop(raster, Rect(x, y, width, height), scale_x, scale_y)
        save_raster(result, output_path)
    except (RetouchError, OSError) as e:
        raise click.ClickException(str(e))

    if not ctx.obj.get('quiet'):
        click.echo(f"✅ Cropped to {result.width}x{result.height}: {output_path}")


@main.command()
@click.argument('input_path', metavar='INPUT', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_path', metavar='OUTPUT', type=click.Path(dir_okay=False))
@click.option('--width', '-w', type=int, help='Target width in pixels')
@click.option('--height', '-h', type=int, help='Target height in pixels')
@click.option('--preset', '-p', help='Named size preset (see "presets")')
@click.pass_context
def resize(ctx, input_path: str, output_path: str, width: Optional[int],
           height: Optional[int], preset: Optional[str]):
    """
    Resample to an exact size; the aspect ratio is not preserved.

    INPUT: Image file to resize
    OUTPUT: Destination PNG file
    """
    if preset and (width is not None or height is not None):
        raise click.UsageError("Use either --preset or --width/--height, not both")
    if not preset and (width is None or height is None):
        raise click.UsageError("Both --width and --height are required without --preset")

    resizer = Resizer.from_config(ctx.obj.get('config', {}))

    try:
        raster = load_raster(input_path)
        if preset:
            result = resizer.resize_to_preset(raster, preset)
        else:
            result = resizer.resize(raster, width, height)
        save_raster(result, output_path)
    except (RetouchError, OSError) as e:
        raise click.ClickException(str(e))

    if not ctx.obj.get('quiet'):
        click.echo(f"✅ Resized {raster.width}x{raster.height} -> "
                   f"{result.width}x{result.height}: {output_path}")


@main.command()
@click.pass_context
def presets(ctx):
    """List the named resize presets."""
    resizer = Resizer.from_config(ctx.obj.get('config', {}))
    for name, (width, height) in resizer.presets.items():
        click.echo(f"{name}: {width}x{height}")


@main.command()
@click.argument('input_path', metavar='INPUT', type=click.Path(exists=True, dir_okay=False))
def info(input_path: str):
    """
    Show the natural dimensions of an image.

    INPUT: Image file to inspect
    """
    try:
        raster = load_raster(input_path)
    except (RetouchError, OSError) as e:
        raise click.ClickException(str(e))

    click.echo(f"{input_path}: {raster.width}x{raster.height}")


if __name__ == '__main__':
    main()
