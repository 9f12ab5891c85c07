# main.py
"""Render the demo sphere scene to a PNG file.

Usage:
    python -m tinytracer [options]

Example:
    python -m tinytracer --width 200 --samples 20 --workers 8 --output spheres.png
"""
import argparse
import logging
import sys
import time
from typing import Optional, Sequence

from tinytracer.renderer.config import RenderConfig
from tinytracer.renderer.framebuffer import FrameBuffer
from tinytracer.renderer.image_io import save_buffer
from tinytracer.renderer.scene import build_scene
from tinytracer.renderer.scheduler import RenderError, RenderScheduler

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    defaults = RenderConfig()
    parser = argparse.ArgumentParser(
        description="Render a scene of diffuse spheres under a sky gradient.",
    )
    parser.add_argument("--width", type=int, default=defaults.image_width,
                        help=f"Image width in pixels (default: {defaults.image_width})")
    parser.add_argument("--aspect-ratio", type=float, default=defaults.aspect_ratio,
                        help="Width / height; the height is derived (default: 16/9)")
    parser.add_argument("--samples", type=int, default=defaults.samples_per_pixel,
                        help=f"Samples per pixel (default: {defaults.samples_per_pixel})")
    parser.add_argument("--max-depth", type=int, default=defaults.max_depth,
                        help=f"Maximum diffuse bounces (default: {defaults.max_depth})")
    parser.add_argument("--workers", type=int, default=defaults.num_workers,
                        help=f"Number of render threads (default: {defaults.num_workers})")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for a reproducible image (default: random)")
    parser.add_argument("--single-sample", action="store_true",
                        help="Trace one un-jittered ray per pixel")
    parser.add_argument("--output", type=str, default=defaults.output_path,
                        help=f"Output file path (default: {defaults.output_path})")
    parser.add_argument("--preview", action="store_true",
                        help="Show the finished image in a window")
    parser.add_argument("--preview-scale", type=int, default=1,
                        help="Integer zoom of the preview window (default: 1)")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug logging")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    return RenderConfig(
        image_width=args.width,
        aspect_ratio=args.aspect_ratio,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        num_workers=args.workers,
        seed=args.seed,
        dispatch_rays=args.single_sample,
        output_path=args.output,
    ).validate()


def print_progress(rows_done: int, total_rows: int):
    print(f"\rProcessing: {rows_done / total_rows * 100.0:.2f}%", end="", flush=True)


def render(config: RenderConfig, quiet: bool = False) -> FrameBuffer:
    """Render `config` and save the image. Encoding failures are only logged."""
    world = build_scene(config.spheres)
    scheduler = RenderScheduler(config, world)

    if not quiet:
        print("Sending rays")
    start_time = time.time()
    frame = scheduler.run(progress=None if quiet else print_progress)
    if not quiet:
        print("\nDone")
    logger.info("Rendered %dx%d at %d spp in %.2fs", config.image_width,
                config.image_height, config.effective_samples_per_pixel,
                time.time() - start_time)

    if not quiet:
        print("Creating image")
    data = frame.to_bytes()

    if not quiet:
        print(f"Saving image as {config.output_path}")
    save_buffer(data, config.image_width, config.image_height, config.output_path)
    return frame


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        frame = render(config, quiet=args.quiet)
    except (ValueError, RenderError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.preview:
        from tinytracer.renderer.preview import show_preview
        show_preview(frame.finalize(), scale=max(1, args.preview_scale))
    return 0


if __name__ == "__main__":
    sys.exit(main())
