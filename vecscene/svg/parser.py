"""SVG parser — facade over xml.etree + svgelements.

Converts raw SVG bytes → SvgDocument: a tree of groups, paths, images and text.
Basic shapes are converted to path segments here, so the flattener only ever
sees path nodes.

A nested <svg> is treated as a group offset by its x/y. Its own viewBox,
width and height do not establish a new viewport.
"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, replace

from PIL import ImageColor
from svgelements import Arc, CubicBezier, Line, Move, QuadraticBezier
from svgelements import Close as SvgClose
from svgelements import Path as SvgPath

from vecscene.errors import DocumentParseError
from vecscene.svg.document import (
    FlatPaint,
    GroupNode,
    ImageNode,
    LinearGradientPaint,
    Node,
    Paint,
    PathNode,
    PatternPaint,
    RadialGradientPaint,
    SvgDocument,
    TextNode,
    count_paths,
)
from vecscene.utils.geometry import (
    Affine,
    Point,
    compose,
    from_svg_transform,
    identity,
    is_identity,
    scale,
    translate,
)
from vecscene.utils.path import Close, CubicTo, LineTo, MoveTo, PathElement, QuadTo

logger = logging.getLogger(__name__)

_XLINK_HREF = "{http://www.w3.org/1999/xlink}href"

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_URL_RE = re.compile(r"url\(\s*['\"]?#([^'\")\s]+)['\"]?\s*\)\s*(.*)$")
_ALPHA_COLOR_RE = re.compile(r"^\s*(rgb|hsl)a?\((.*)\)\s*$", re.IGNORECASE)

_GROUP_TAGS = {"g", "a", "svg", "switch"}
_SHAPE_TAGS = {"path", "rect", "circle", "ellipse", "line", "polyline", "polygon"}
# Never rendered directly
_SKIP_TAGS = {
    "defs",
    "title",
    "desc",
    "metadata",
    "style",
    "script",
    "clipPath",
    "mask",
    "marker",
    "symbol",
    "linearGradient",
    "radialGradient",
    "pattern",
    "filter",
}
_PAINT_SERVERS = {
    "linearGradient": LinearGradientPaint,
    "radialGradient": RadialGradientPaint,
    "pattern": PatternPaint,
}

# Cubic control distance for a quarter ellipse: 4/3 * (sqrt(2) - 1)
_KAPPA = 0.5522847498307936


@dataclass(frozen=True)
class _Style:
    """Inherited presentation properties, as raw attribute strings."""

    fill: str = "black"
    stroke: str = "none"
    stroke_width: str | None = None
    color: str = "black"


def parse_document(data: bytes | str) -> SvgDocument:
    """Parse SVG bytes (or text) into a document tree.

    Raises DocumentParseError on malformed XML, a non-svg root element, or
    invalid transform / path data.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise DocumentParseError(f"malformed SVG document: {e}") from e

    if _local_name(root.tag) != "svg":
        raise DocumentParseError(f"root element is <{_local_name(root.tag)}>, expected <svg>")

    parser = _TreeBuilder(root)
    document = parser.build()
    logger.info(
        "Parsed SVG: %d paths, canvas %.0f×%.0f",
        count_paths(document.root),
        document.width,
        document.height,
    )
    return document


class _TreeBuilder:
    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.by_id: dict[str, ET.Element] = {}
        self.paint_servers: dict[str, Paint] = {}
        for el in root.iter():
            el_id = el.get("id")
            if not el_id:
                continue
            self.by_id.setdefault(el_id, el)
            server = _PAINT_SERVERS.get(_local_name(el.tag))
            if server is not None:
                self.paint_servers[el_id] = server(el_id)
        self._use_stack: list[str] = []

    def build(self) -> SvgDocument:
        width = _parse_length(self.root.get("width"))
        height = _parse_length(self.root.get("height"))
        viewbox = _parse_viewbox(self.root.get("viewBox"))
        if viewbox is not None:
            width = viewbox[2] if width is None else width
            height = viewbox[3] if height is None else height
        width = width or 0.0
        height = height or 0.0

        transform = self._transform(self.root)
        if viewbox is not None:
            vb_transform = _viewbox_transform(
                viewbox, width, height, self.root.get("preserveAspectRatio", "")
            )
            transform = compose(vb_transform, transform)

        style = self._style(self.root, _Style())
        children = self._children(self.root, style)
        root = GroupNode(transform=transform, children=children, id=self.root.get("id", ""))
        return SvgDocument(root=root, width=width, height=height, viewbox=viewbox)

    def _children(self, el: ET.Element, style: _Style) -> list[Node]:
        children: list[Node] = []
        for child in el:
            node = self._convert(child, style)
            if node is not None:
                children.append(node)
        return children

    def _convert(self, el: ET.Element, parent_style: _Style) -> Node | None:
        if not isinstance(el.tag, str):
            # comments and processing instructions
            return None
        tag = _local_name(el.tag)
        if tag in _SKIP_TAGS:
            return None
        if _declared(el, "display") == "none":
            logger.debug("Skipping <%s id=%r>: display none", tag, el.get("id"))
            return None

        style = self._style(el, parent_style)

        if tag in _GROUP_TAGS:
            transform = self._transform(el)
            if tag == "svg":
                x = _parse_length(el.get("x")) or 0.0
                y = _parse_length(el.get("y")) or 0.0
                transform = compose(translate(x, y), transform)
            if tag == "switch":
                children = self._children(el, style)[:1]
            else:
                children = self._children(el, style)
            return GroupNode(transform=transform, children=children, id=el.get("id", ""))

        if tag == "use":
            return self._use(el, style)

        if tag in _SHAPE_TAGS:
            segments = self._shape_segments(tag, el)
            if not segments:
                logger.debug("Skipping <%s id=%r>: no geometry", tag, el.get("id"))
                return None
            node = PathNode(
                segments=segments,
                fill=self._paint(style.fill, style),
                stroke=self._paint(style.stroke, style),
                stroke_width=_parse_stroke_width(style.stroke_width),
                id=el.get("id", ""),
            )
            return self._wrap(el, node)

        if tag == "image":
            href = el.get(_XLINK_HREF) or el.get("href") or ""
            return self._wrap(el, ImageNode(href=href, id=el.get("id", "")))

        if tag == "text":
            return self._wrap(el, TextNode(text="".join(el.itertext()), id=el.get("id", "")))

        logger.debug("Skipping unknown element <%s>", tag)
        return None

    def _wrap(self, el: ET.Element, node: Node) -> Node:
        # Leaf transforms live on a synthetic group
        transform = self._transform(el)
        if is_identity(transform):
            return node
        return GroupNode(transform=transform, children=[node])

    def _use(self, el: ET.Element, style: _Style) -> Node | None:
        href = el.get(_XLINK_HREF) or el.get("href") or ""
        ref_id = href[1:] if href.startswith("#") else ""
        target = self.by_id.get(ref_id)
        if target is None:
            logger.warning("Skipping <use>: unresolved reference %r", href)
            return None
        if ref_id in self._use_stack:
            raise DocumentParseError(f"recursive <use> reference to #{ref_id}")

        x = _parse_length(el.get("x")) or 0.0
        y = _parse_length(el.get("y")) or 0.0
        transform = compose(self._transform(el), translate(x, y))

        self._use_stack.append(ref_id)
        try:
            if _local_name(target.tag) == "symbol":
                children = self._children(target, self._style(target, style))
            else:
                node = self._convert(target, style)
                children = [node] if node is not None else []
        finally:
            self._use_stack.pop()
        return GroupNode(transform=transform, children=children, id=el.get("id", ""))

    def _transform(self, el: ET.Element) -> Affine:
        raw = el.get("transform")
        try:
            return from_svg_transform(raw)
        except (ValueError, IndexError) as e:
            raise DocumentParseError(f"invalid transform {raw!r}: {e}") from e

    def _style(self, el: ET.Element, parent: _Style) -> _Style:
        updates: dict[str, str] = {}
        for prop, attr in (
            ("fill", "fill"),
            ("stroke", "stroke"),
            ("stroke_width", "stroke-width"),
            ("color", "color"),
        ):
            value = _declared(el, attr)
            if value is not None and value != "inherit":
                updates[prop] = value
        return replace(parent, **updates) if updates else parent

    def _paint(self, value: str, style: _Style) -> Paint | None:
        value = value.strip()
        if value == "none":
            return None
        if value == "currentColor":
            value = style.color
        match = _URL_RE.match(value)
        if match:
            ref_id, fallback = match.group(1), match.group(2).strip()
            server = self.paint_servers.get(ref_id)
            if server is not None:
                return server
            if fallback and fallback != "none":
                return _parse_color(fallback)
            logger.warning("Unresolved paint reference %r, treating as none", value)
            return None
        return _parse_color(value)

    def _shape_segments(self, tag: str, el: ET.Element) -> list[PathElement]:
        if tag == "path":
            return _path_segments(el.get("d", ""))
        if tag == "rect":
            return _rect_segments(el)
        if tag == "circle":
            r = _parse_length(el.get("r")) or 0.0
            return _ellipse_segments(el, r, r)
        if tag == "ellipse":
            rx = _parse_length(el.get("rx")) or 0.0
            ry = _parse_length(el.get("ry")) or 0.0
            return _ellipse_segments(el, rx, ry)
        if tag == "line":
            p1 = (_parse_length(el.get("x1")) or 0.0, _parse_length(el.get("y1")) or 0.0)
            p2 = (_parse_length(el.get("x2")) or 0.0, _parse_length(el.get("y2")) or 0.0)
            return [MoveTo(p1), LineTo(p2)]
        return _poly_segments(el.get("points", ""), closed=tag == "polygon")


def _path_segments(d: str) -> list[PathElement]:
    """Path data → segment stream.

    Close is kept as its own segment and no move is inserted after it; a
    drawing command following a close continues from the subpath start.
    """
    if not d.strip():
        return []
    try:
        path = SvgPath(d)
    except (ValueError, IndexError) as e:
        raise DocumentParseError(f"invalid path data: {e}") from e

    out: list[PathElement] = []
    for seg in path:
        if isinstance(seg, Move):
            out.append(MoveTo(_pt(seg.end)))
        elif isinstance(seg, SvgClose):
            out.append(Close())
        elif isinstance(seg, Line):
            out.append(LineTo(_pt(seg.end)))
        elif isinstance(seg, QuadraticBezier):
            out.append(QuadTo(_pt(seg.control), _pt(seg.end)))
        elif isinstance(seg, CubicBezier):
            out.append(CubicTo(_pt(seg.control1), _pt(seg.control2), _pt(seg.end)))
        elif isinstance(seg, Arc):
            cubics = list(seg.as_cubic_curves())
            if not cubics:
                # zero radius: a straight line to the end point
                out.append(LineTo(_pt(seg.end)))
            for cubic in cubics:
                out.append(CubicTo(_pt(cubic.control1), _pt(cubic.control2), _pt(cubic.end)))
    if not out:
        raise DocumentParseError(f"invalid path data: {d!r}")
    if not isinstance(out[0], MoveTo):
        raise DocumentParseError(f"path data must begin with a moveto: {d!r}")
    return out


def _rect_segments(el: ET.Element) -> list[PathElement]:
    x = _parse_length(el.get("x")) or 0.0
    y = _parse_length(el.get("y")) or 0.0
    w = _parse_length(el.get("width")) or 0.0
    h = _parse_length(el.get("height")) or 0.0
    if w <= 0 or h <= 0:
        return []
    rx = _parse_length(el.get("rx"))
    ry = _parse_length(el.get("ry"))
    if rx is None:
        rx = ry
    if ry is None:
        ry = rx
    rx = min(max(rx or 0.0, 0.0), w / 2)
    ry = min(max(ry or 0.0, 0.0), h / 2)

    if rx == 0 or ry == 0:
        return [
            MoveTo((x, y)),
            LineTo((x + w, y)),
            LineTo((x + w, y + h)),
            LineTo((x, y + h)),
            Close(),
        ]

    kx, ky = rx * _KAPPA, ry * _KAPPA
    r, b = x + w, y + h
    return [
        MoveTo((x + rx, y)),
        LineTo((r - rx, y)),
        CubicTo((r - rx + kx, y), (r, y + ry - ky), (r, y + ry)),
        LineTo((r, b - ry)),
        CubicTo((r, b - ry + ky), (r - rx + kx, b), (r - rx, b)),
        LineTo((x + rx, b)),
        CubicTo((x + rx - kx, b), (x, b - ry + ky), (x, b - ry)),
        LineTo((x, y + ry)),
        CubicTo((x, y + ry - ky), (x + rx - kx, y), (x + rx, y)),
        Close(),
    ]


def _ellipse_segments(el: ET.Element, rx: float, ry: float) -> list[PathElement]:
    if rx <= 0 or ry <= 0:
        return []
    cx = _parse_length(el.get("cx")) or 0.0
    cy = _parse_length(el.get("cy")) or 0.0
    kx, ky = rx * _KAPPA, ry * _KAPPA
    return [
        MoveTo((cx + rx, cy)),
        CubicTo((cx + rx, cy + ky), (cx + kx, cy + ry), (cx, cy + ry)),
        CubicTo((cx - kx, cy + ry), (cx - rx, cy + ky), (cx - rx, cy)),
        CubicTo((cx - rx, cy - ky), (cx - kx, cy - ry), (cx, cy - ry)),
        CubicTo((cx + kx, cy - ry), (cx + rx, cy - ky), (cx + rx, cy)),
        Close(),
    ]


def _poly_segments(points: str, closed: bool) -> list[PathElement]:
    numbers = [float(n) for n in _NUMBER_RE.findall(points)]
    # An odd trailing coordinate is ignored
    pairs = [(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]
    if len(pairs) < 2:
        return []
    out: list[PathElement] = [MoveTo(pairs[0])]
    out.extend(LineTo(p) for p in pairs[1:])
    if closed:
        out.append(Close())
    return out


def _viewbox_transform(
    viewbox: tuple[float, float, float, float],
    width: float,
    height: float,
    preserve: str,
) -> Affine:
    """Map the viewBox into the viewport. Alignments other than none are centred."""
    vb_x, vb_y, vb_w, vb_h = viewbox
    if vb_w <= 0 or vb_h <= 0 or width <= 0 or height <= 0:
        return identity()
    sx = width / vb_w
    sy = height / vb_h
    if preserve.strip().startswith("none"):
        return compose(scale(sx, sy), translate(-vb_x, -vb_y))
    s = max(sx, sy) if "slice" in preserve else min(sx, sy)
    tx = (width - vb_w * s) / 2
    ty = (height - vb_h * s) / 2
    return compose(translate(tx, ty), compose(scale(s), translate(-vb_x, -vb_y)))


def _declared(el: ET.Element, name: str) -> str | None:
    """A property from the style attribute, falling back to the presentation attribute."""
    style = el.get("style")
    if style:
        for decl in style.split(";"):
            key, sep, value = decl.partition(":")
            if sep and key.strip() == name:
                return value.strip()
    value = el.get(name)
    return value.strip() if value is not None else None


def _parse_color(value: str) -> FlatPaint | None:
    base, alpha = _split_alpha(value)
    try:
        rgb = ImageColor.getrgb(base)
    except ValueError:
        logger.warning("Invalid color %r, treating as none", value)
        return None
    if alpha is None:
        alpha = rgb[3] if len(rgb) == 4 else 255
    return FlatPaint(rgb[0], rgb[1], rgb[2], alpha)


def _split_alpha(value: str) -> tuple[str, int | None]:
    """Split a CSS rgb()/hsl() color with an alpha component.

    CSS alpha is a 0-1 number or a percentage, which ImageColor does not
    accept. Returns the opaque color function and the alpha scaled to 0-255.
    """
    match = _ALPHA_COLOR_RE.match(value)
    if not match:
        return value, None
    args = [arg.strip() for arg in re.split(r"[,/]", match.group(2))]
    if len(args) != 4:
        return value, None
    raw = args[3]
    try:
        alpha = float(raw[:-1]) / 100 if raw.endswith("%") else float(raw)
    except ValueError:
        return value, None
    base = f"{match.group(1).lower()}({', '.join(args[:3])})"
    return base, round(min(max(alpha, 0.0), 1.0) * 255)


def _parse_length(value: str | None) -> float | None:
    """Leading number of a length. Units are ignored (user units == px)."""
    if value is None:
        return None
    match = _NUMBER_RE.match(value.strip())
    if not match:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def _parse_stroke_width(value: str | None) -> float | None:
    width = _parse_length(value)
    if width is None or width < 0:
        return None
    return width


def _parse_viewbox(value: str | None) -> tuple[float, float, float, float] | None:
    if not value:
        return None
    numbers = [float(n) for n in _NUMBER_RE.findall(value)]
    if len(numbers) != 4:
        return None
    return (numbers[0], numbers[1], numbers[2], numbers[3])


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def _pt(p) -> Point:
    return (float(p.x), float(p.y))
