"""Command-line entry point: inspect or rasterize a vector document."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from vecscene.config import settings
from vecscene.engine.flatten import parse
from vecscene.errors import SceneError
from vecscene.render.objects import DrawMode, VectorSprite
from vecscene.render.pillow_sink import PillowSink, RasterConfig

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vecscene", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Print record counts and bounds")
    info.add_argument("file", type=Path)

    render = sub.add_parser("render", help="Rasterize to a PNG")
    render.add_argument("file", type=Path)
    render.add_argument("out", type=Path)
    render.add_argument("--mode", choices=[m.value for m in DrawMode], default=DrawMode.FILL_STROKE.value)
    render.add_argument("--scale", type=float, default=1.0)
    render.add_argument("--width", type=int, default=None)
    render.add_argument("--height", type=int, default=None)
    render.add_argument("--background", default=settings.background)
    render.add_argument("--samples", type=int, default=settings.curve_samples)
    return parser


def _info(path: Path) -> int:
    scene = parse(path.read_bytes())
    fills = sum(1 for r in scene if r.fill is not None)
    strokes = sum(1 for r in scene if r.stroke is not None)
    print(f"records: {len(scene)}")
    print(f"filled: {fills}")
    print(f"stroked: {strokes}")
    bounds = scene.bounds()
    if bounds is None:
        print("bounds: empty")
    else:
        print("bounds: {:.2f} {:.2f} {:.2f} {:.2f}".format(*bounds))
    return 0


def _render(args: argparse.Namespace) -> int:
    scene = parse(args.file.read_bytes())
    bounds = scene.bounds() or (0.0, 0.0, 0.0, 0.0)
    width = args.width or max(1, int(round(bounds[2] * args.scale)))
    height = args.height or max(1, int(round(bounds[3] * args.scale)))

    sprite = VectorSprite(scene, size=(width, height), mode=DrawMode(args.mode), scale=args.scale)
    sink = PillowSink(width, height, RasterConfig(curve_samples=args.samples, background=args.background))
    sprite.draw(sink, (0.0, 0.0))
    sink.save(args.out)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    try:
        if args.command == "info":
            return _info(args.file)
        return _render(args)
    except SceneError as e:
        logger.error("%s: %s", args.file, e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
