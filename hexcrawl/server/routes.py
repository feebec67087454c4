"""API routes for the hexcrawl sandbox server.

Every request carries its own inputs (cells, positions, patterns), so the
routes stay as pure as the engine underneath. Only custom templates are kept
in memory for the lifetime of the process.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..config import resolve
from ..exploration import ExplorationState, clamp_sight_distance, hex_visibility
from ..map.brush import brush_hexes
from ..map.coordinates import axial_to_pixel, hex_distance, hexes_in_range, hexes_in_rectangle, pixel_to_hex
from ..map.flood_fill import FillMatcher, apply_flood_fill, flood_fill, flood_fill_preview
from ..map.patterns import capture, paste, preview_paste, transform
from ..models import (
    AxialCoordinate,
    LandmarkType,
    MapDimensions,
    Pattern,
    PixelCoordinate,
    RevealMode,
    TerrainType,
    ViewMode,
    cells_from_dict,
    cells_to_dict,
)
from ..templates import TemplateLibrary, apply_template, template_from_selection

router = APIRouter()

# Custom templates created through the API
library = TemplateLibrary()

_settings = resolve()


# Request/Response models
class Coord(BaseModel):
    q: int
    r: int

    def axial(self) -> AxialCoordinate:
        return AxialCoordinate(self.q, self.r)


class Dimensions(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def dims(self) -> MapDimensions:
        return MapDimensions(self.width, self.height)


class TransformOptions(BaseModel):
    rotation: int = 0
    mirror: Optional[str] = None
    scale: float = 1.0


class PixelRequest(BaseModel):
    x: float
    y: float
    hex_size: float = _settings["grid"]["hex_size"]


class RangeRequest(BaseModel):
    center: Coord
    radius: int = Field(ge=0)


class BrushRequest(BaseModel):
    center: Coord
    size: int = 1
    shape: str = "circle"
    dimensions: Optional[Dimensions] = None


class FloodFillRequest(BaseModel):
    start: Coord
    cells: Dict[str, Dict[str, Any]] = {}
    dimensions: Optional[Dimensions] = None
    match_terrain: Optional[TerrainType] = None
    match_landmark: Optional[LandmarkType] = None
    terrain: Optional[TerrainType] = None
    landmark: Optional[LandmarkType] = None
    clear_existing: bool = False


class VisibilityRequest(BaseModel):
    player_positions: List[Coord] = []
    sight_distance: int = _settings["exploration"]["sight_distance"]
    explored: List[str] = []
    mode: ViewMode = ViewMode.PLAYER
    reveal_mode: RevealMode = RevealMode.PERMANENT
    query: List[Coord] = []


class CaptureRequest(BaseModel):
    start: Coord
    end: Coord
    cells: Dict[str, Dict[str, Any]] = {}
    origin: Optional[Coord] = None


class PastePreviewRequest(BaseModel):
    pattern: Dict[str, Any]
    target: Coord
    dimensions: Dimensions
    options: TransformOptions = TransformOptions()


class TemplateCreateRequest(BaseModel):
    name: str
    pattern: Dict[str, Any]
    description: str = ""
    category: str = "custom"
    tags: List[str] = []
    author: Optional[str] = None


class TemplateApplyRequest(BaseModel):
    target: Coord
    cells: Dict[str, Dict[str, Any]] = {}
    dimensions: Optional[Dimensions] = None
    options: TransformOptions = TransformOptions()


def _keys(hexes) -> List[str]:
    return [h.key() for h in hexes]


# ============================================================================
# Geometry
# ============================================================================

@router.post("/pixel-to-hex")
async def pixel_to_hex_route(req: PixelRequest) -> Dict[str, Any]:
    hex = pixel_to_hex(PixelCoordinate(req.x, req.y), req.hex_size)
    centre = axial_to_pixel(hex, req.hex_size)
    return {"hex": hex.to_dict(), "center": {"x": centre.x, "y": centre.y}}


@router.post("/range")
async def range_route(req: RangeRequest) -> Dict[str, Any]:
    hexes = hexes_in_range(req.center.axial(), req.radius)
    return {"count": len(hexes), "hexes": _keys(hexes)}


@router.get("/distance")
async def distance_route(q1: int, r1: int, q2: int, r2: int) -> Dict[str, int]:
    return {"distance": hex_distance(AxialCoordinate(q1, r1), AxialCoordinate(q2, r2))}


@router.post("/brush")
async def brush_route(req: BrushRequest) -> Dict[str, Any]:
    hexes = brush_hexes(req.center.axial(), req.size, req.shape)
    if req.dimensions is not None:
        dims = req.dimensions.dims()
        hexes = [h for h in hexes if dims.contains(h)]
    return {"count": len(hexes), "hexes": _keys(hexes)}


@router.post("/flood-fill")
async def flood_fill_route(req: FloodFillRequest) -> Dict[str, Any]:
    cells = cells_from_dict(req.cells)
    matcher = None
    if req.match_terrain or req.match_landmark:
        matcher = FillMatcher(terrain=req.match_terrain, landmark=req.match_landmark)
    fill_cfg = _settings["flood_fill"]
    dims = req.dimensions.dims() if req.dimensions else None
    preview = flood_fill_preview(
        req.start.axial(), cells, matcher,
        large_threshold=int(fill_cfg["large_threshold"]),
        max_hexes=int(fill_cfg["preview_limit"]),
        dimensions=dims,
    )
    out: Dict[str, Any] = {
        "count": preview.count,
        "is_large_operation": preview.is_large_operation,
        "hexes": _keys(preview.hexes),
    }
    if req.terrain or req.landmark or req.clear_existing:
        # the preview is capped; painting covers the whole region
        region = flood_fill(req.start.axial(), cells, matcher, dimensions=dims)
        updated = apply_flood_fill(region, cells, req.terrain, req.landmark, req.clear_existing)
        out["painted"] = len(region)
        out["cells"] = cells_to_dict(updated)
    return out


# ============================================================================
# Exploration
# ============================================================================

@router.post("/visibility")
async def visibility_route(req: VisibilityRequest) -> Dict[str, Any]:
    exp_cfg = _settings["exploration"]
    sight = clamp_sight_distance(req.sight_distance, int(exp_cfg["min_sight"]), int(exp_cfg["max_sight"]))
    explored = frozenset(AxialCoordinate.from_key(k).key() for k in req.explored)
    state = ExplorationState(explored=explored).update_visibility(
        [p.axial() for p in req.player_positions], sight
    )
    verdicts = {}
    for coord in req.query:
        hex = coord.axial()
        v = hex_visibility(req.mode, req.reveal_mode, state.is_explored(hex), state.is_visible(hex))
        verdicts[hex.key()] = {
            "should_show": v.should_show,
            "is_explored": v.is_explored,
            "is_currently_visible": v.is_currently_visible,
        }
    return {
        "sight_distance": sight,
        "visible": sorted(state.visible),
        "explored": sorted(state.explored),
        "verdicts": verdicts,
    }


# ============================================================================
# Patterns
# ============================================================================

@router.post("/patterns/capture")
async def capture_route(req: CaptureRequest) -> Dict[str, Any]:
    selection = hexes_in_rectangle(req.start.axial(), req.end.axial())
    origin = req.origin.axial() if req.origin else None
    pattern = capture(selection, cells_from_dict(req.cells), origin)
    return {"entries": len(pattern), **pattern.to_dict()}


@router.post("/patterns/preview")
async def paste_preview_route(req: PastePreviewRequest) -> Dict[str, Any]:
    pattern = transform(
        Pattern.from_dict(req.pattern),
        req.options.rotation, req.options.mirror, req.options.scale,
    )
    hexes = preview_paste(pattern, req.target.axial(), req.dimensions.dims())
    return {"count": len(hexes), "hexes": _keys(hexes)}


@router.post("/patterns/paste")
async def paste_route(req: PastePreviewRequest) -> Dict[str, Any]:
    pattern = transform(
        Pattern.from_dict(req.pattern),
        req.options.rotation, req.options.mirror, req.options.scale,
    )
    placements = paste(pattern, req.target.axial())
    return {"placements": [{"hex": c.key(), **content.to_dict()} for c, content in placements]}


# ============================================================================
# Templates
# ============================================================================

@router.get("/templates")
async def list_templates(category: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
    return [t.to_dict() for t in library.search(category=category, term=search)]


@router.post("/templates")
async def create_template(req: TemplateCreateRequest) -> Dict[str, Any]:
    template = template_from_selection(
        Pattern.from_dict(req.pattern), req.name, req.description,
        req.category, req.tags, req.author,
    )
    return library.add(template).to_dict()


@router.delete("/templates/{template_id}")
async def delete_template(template_id: str) -> Dict[str, Any]:
    if not library.remove(template_id):
        raise HTTPException(status_code=404, detail=f"Template '{template_id}' not found")
    return {"deleted": template_id}


@router.post("/templates/{template_id}/apply")
async def apply_template_route(template_id: str, req: TemplateApplyRequest) -> Dict[str, Any]:
    template = library.get(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Template '{template_id}' not found")
    cells = apply_template(
        template, req.target.axial(), cells_from_dict(req.cells),
        req.dimensions.dims() if req.dimensions else None,
        req.options.rotation, req.options.mirror, req.options.scale,
    )
    return {"template": template.id, "cells": cells_to_dict(cells)}
