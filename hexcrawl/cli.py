from __future__ import annotations
import argparse, json, sys
from typing import Any, Dict, List, Optional

from .biomes import BiomeConfig, BiomeType, generate_biome
from .config import ENV_PREFIX, resolve
from .document import load_document
from .exploration import clamp_sight_distance, hex_visibility
from .map.brush import brush_hexes
from .map.coordinates import (
    axial_to_pixel,
    hex_distance,
    hexes_in_range,
    hexes_in_rectangle,
    pixel_to_hex,
)
from .map.flood_fill import FillMatcher, apply_flood_fill, flood_fill_preview
from .map.patterns import ROTATION_ANGLES, capture, paste, transform
from .map.validation import validate_all
from .models import (
    AxialCoordinate,
    BrushShape,
    LandmarkType,
    MapDataError,
    MapDimensions,
    MirrorAxis,
    PixelCoordinate,
    TerrainType,
    ViewMode,
    cells_to_dict,
)
from .templates import TemplateCategory, TemplateLibrary, apply_template


def _coord(text: str) -> AxialCoordinate:
    return AxialCoordinate.from_key(text.replace(" ", ""))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m hexcrawl.cli",
        description="Hex crawl map geometry tools"
    )
    p.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    p.add_argument("--env-prefix", type=str, default=ENV_PREFIX, help="Env prefix for overrides")
    sub = p.add_subparsers(dest="cmd")

    rg = sub.add_parser("range", help="List hexes within a radius")
    rg.add_argument("--at", type=_coord, required=True, help="Centre as q,r")
    rg.add_argument("--radius", type=int, required=True)

    ds = sub.add_parser("distance", help="Hex distance between two hexes")
    ds.add_argument("a", type=_coord)
    ds.add_argument("b", type=_coord)

    px = sub.add_parser("pixel", help="Convert between pixel and axial space")
    px.add_argument("--hex", type=_coord, default=None, help="Axial q,r to project")
    px.add_argument("--x", type=float, default=None)
    px.add_argument("--y", type=float, default=None)
    px.add_argument("--hex-size", type=float, default=None)

    br = sub.add_parser("brush", help="Hexes painted by a brush")
    br.add_argument("--at", type=_coord, required=True)
    br.add_argument("--size", type=int, default=1)
    br.add_argument("--shape", type=str, default=BrushShape.CIRCLE.value,
                    choices=[s.value for s in BrushShape])
    br.add_argument("--map", type=str, default=None, help="Drop hexes outside this map")

    fl = sub.add_parser("fill", help="Flood fill preview (and optional apply)")
    _add_map_arg(fl)
    fl.add_argument("--at", type=_coord, required=True)
    fl.add_argument("--match-terrain", type=str, default=None, choices=[t.value for t in TerrainType])
    fl.add_argument("--match-landmark", type=str, default=None, choices=[l.value for l in LandmarkType])
    fl.add_argument("--terrain", type=str, default=None, choices=[t.value for t in TerrainType],
                    help="Terrain to paint over the region")
    fl.add_argument("--landmark", type=str, default=None, choices=[l.value for l in LandmarkType])
    fl.add_argument("--clear", action="store_true", help="Clear content instead of painting")

    vs = sub.add_parser("visibility", help="Recompute visible/explored hexes for the player tokens")
    _add_map_arg(vs)
    vs.add_argument("--mode", type=str, default=ViewMode.PLAYER.value, choices=[m.value for m in ViewMode])
    vs.add_argument("--sight", type=int, default=None, help="Override the document's sight distance")

    cp = sub.add_parser("copy", help="Capture a rectangle and preview a paste")
    _add_map_arg(cp)
    cp.add_argument("--from", dest="start", type=_coord, required=True)
    cp.add_argument("--to", dest="end", type=_coord, required=True)
    cp.add_argument("--paste-at", type=_coord, default=None)
    _add_transform_args(cp)

    tp = sub.add_parser("templates", help="List or apply terrain templates")
    tp.add_argument("action", choices=["list", "apply"])
    tp.add_argument("--id", dest="template_id", type=str, default=None)
    tp.add_argument("--category", type=str, default=None, choices=[c.value for c in TemplateCategory])
    tp.add_argument("--search", type=str, default=None)
    tp.add_argument("--map", type=str, default=None)
    tp.add_argument("--at", type=_coord, default=None)
    _add_transform_args(tp)

    bm = sub.add_parser("biome", help="Generate a seeded biome block")
    bm.add_argument("--width", type=int, required=True)
    bm.add_argument("--height", type=int, required=True)
    bm.add_argument("--type", dest="biome_type", type=str, default=BiomeType.MIXED.value,
                    choices=[b.value for b in BiomeType])
    bm.add_argument("--density", type=float, default=0.8)
    bm.add_argument("--landmark-chance", type=float, default=0.05)
    bm.add_argument("--seed", type=int, default=0)

    vd = sub.add_parser("validate", help="Report problems in a map document")
    _add_map_arg(vd)

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _add_map_arg(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--map", type=str, required=True, help="Map document (.json or .yaml)")


def _add_transform_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--rotate", type=int, default=0, choices=list(ROTATION_ANGLES))
    ap.add_argument("--mirror", type=str, default=None, choices=[m.value for m in MirrorAxis])
    ap.add_argument("--scale", type=float, default=1.0)


def _keys(hexes) -> List[str]:
    return [h.key() for h in hexes]


def _cmd_range(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    hexes = hexes_in_range(args.at, args.radius)
    return {"center": args.at.key(), "radius": args.radius, "count": len(hexes), "hexes": _keys(hexes)}


def _cmd_pixel(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    size = args.hex_size if args.hex_size is not None else float(cfg["grid"]["hex_size"])
    if args.hex is not None:
        pixel = axial_to_pixel(args.hex, size)
        return {"hex": args.hex.key(), "x": pixel.x, "y": pixel.y, "hexSize": size}
    if args.x is None or args.y is None:
        raise MapDataError("pixel needs either --hex or both --x and --y")
    hex = pixel_to_hex(PixelCoordinate(args.x, args.y), size)
    return {"x": args.x, "y": args.y, "hex": hex.key(), "hexSize": size}


def _cmd_brush(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    hexes = brush_hexes(args.at, args.size, args.shape)
    if args.map:
        dims = load_document(args.map).dimensions
        hexes = [h for h in hexes if dims.contains(h)]
    return {"size": args.size, "shape": args.shape, "count": len(hexes), "hexes": _keys(hexes)}


def _cmd_fill(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    doc = load_document(args.map)
    matcher: Optional[FillMatcher] = None
    if args.match_terrain or args.match_landmark:
        matcher = FillMatcher(
            terrain=TerrainType(args.match_terrain) if args.match_terrain else None,
            landmark=LandmarkType(args.match_landmark) if args.match_landmark else None,
        )
    fill_cfg = cfg["flood_fill"]
    preview = flood_fill_preview(
        args.at, doc.cells, matcher,
        large_threshold=int(fill_cfg["large_threshold"]),
        max_hexes=None,
        dimensions=doc.dimensions,
    )
    out: Dict[str, Any] = {
        "count": preview.count,
        "isLargeOperation": preview.is_large_operation,
        "hexes": _keys(preview.hexes),
    }
    if args.terrain or args.landmark or args.clear:
        cells = apply_flood_fill(
            preview.hexes, doc.cells,
            terrain=TerrainType(args.terrain) if args.terrain else None,
            landmark=LandmarkType(args.landmark) if args.landmark else None,
            clear_existing=args.clear,
        )
        out["cells"] = cells_to_dict(cells)
    return out


def _cmd_visibility(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    doc = load_document(args.map)
    exp_cfg = cfg["exploration"]
    sight = args.sight if args.sight is not None else doc.sight_distance
    sight = clamp_sight_distance(sight, int(exp_cfg["min_sight"]), int(exp_cfg["max_sight"]))
    state = doc.exploration.update_visibility(doc.player_positions, sight)
    shown = []
    for key in sorted(doc.cells):
        coord = AxialCoordinate.from_key(key)
        verdict = hex_visibility(args.mode, doc.reveal_mode, state.is_explored(coord), state.is_visible(coord))
        if verdict.should_show:
            shown.append(key)
    stats = state.stats(doc.cells)
    return {
        "sightDistance": sight,
        "revealMode": doc.reveal_mode.value,
        "visibleHexes": sorted(state.visible),
        "exploredHexes": sorted(state.explored),
        "shownCells": shown,
        "explorationPercentage": stats.exploration_percentage,
    }


def _cmd_copy(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    doc = load_document(args.map)
    selection = hexes_in_rectangle(args.start, args.end)
    pattern = capture(selection, doc.cells)
    out: Dict[str, Any] = {"pattern": pattern.to_dict(), "entries": len(pattern)}
    if args.paste_at is not None:
        moved = transform(pattern, args.rotate, args.mirror, args.scale)
        placements = paste(moved, args.paste_at)
        out["preview"] = [c.key() for c, _ in placements if doc.dimensions.contains(c)]
    return out


def _cmd_templates(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    library = TemplateLibrary()
    if args.action == "list":
        found = library.search(category=args.category, term=args.search)
        return {"templates": [{"id": t.id, "name": t.name, "category": t.category.value,
                               "entries": len(t.pattern)} for t in found]}
    if not (args.template_id and args.map and args.at is not None):
        raise MapDataError("templates apply needs --id, --map and --at")
    template = library.get(args.template_id)
    if template is None:
        raise MapDataError(f"Unknown template {args.template_id!r}")
    doc = load_document(args.map)
    cells = apply_template(template, args.at, doc.cells, doc.dimensions,
                           args.rotate, args.mirror, args.scale)
    return {"template": template.id, "cells": cells_to_dict(cells)}


def _cmd_biome(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    config = BiomeConfig(
        biome_type=args.biome_type,
        density=args.density,
        landmark_chance=args.landmark_chance,
        seed=args.seed,
    )
    return generate_biome(MapDimensions(args.width, args.height), config).to_dict()


def _cmd_validate(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    doc = load_document(args.map)
    messages = validate_all(doc.cells, doc.dimensions, doc.player_positions, doc.sight_distance)
    return {"ok": not messages, "messages": messages}


_COMMANDS = {
    "range": _cmd_range,
    "distance": lambda args, cfg: {"distance": hex_distance(args.a, args.b)},
    "pixel": _cmd_pixel,
    "brush": _cmd_brush,
    "fill": _cmd_fill,
    "visibility": _cmd_visibility,
    "copy": _cmd_copy,
    "templates": _cmd_templates,
    "biome": _cmd_biome,
    "validate": _cmd_validate,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        cfg = resolve(args.config, args.env_prefix)
        out = _COMMANDS[args.cmd](args, cfg)
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print(json.dumps(out, indent=2))
    if args.cmd == "validate" and not out["ok"]:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
