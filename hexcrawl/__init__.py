"""hexcrawl: hex grid geometry, exploration and region transforms for hex crawl maps."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "AxialCoordinate",
    "PixelCoordinate",
    "HexCell",
    "HexCellContent",
    "MapDimensions",
    "Pattern",
    "TerrainType",
    "LandmarkType",
    "RevealMode",
    "ViewMode",
    "BrushShape",
    "MirrorAxis",
    "InvalidEnumError",
    "axial_to_pixel",
    "pixel_to_hex",
    "hex_distance",
    "hexes_in_range",
    "brush_hexes",
    "flood_fill",
    "FillMatcher",
    "capture",
    "paste",
    "preview_paste",
    "transform",
    "hex_visibility",
    "ExplorationState",
    "TemplateLibrary",
    "generate_biome",
    "__version__",
]

_EXPORTS = {
    "AxialCoordinate": ("models", "AxialCoordinate"),
    "PixelCoordinate": ("models", "PixelCoordinate"),
    "HexCell": ("models", "HexCell"),
    "HexCellContent": ("models", "HexCellContent"),
    "MapDimensions": ("models", "MapDimensions"),
    "Pattern": ("models", "Pattern"),
    "TerrainType": ("models", "TerrainType"),
    "LandmarkType": ("models", "LandmarkType"),
    "RevealMode": ("models", "RevealMode"),
    "ViewMode": ("models", "ViewMode"),
    "BrushShape": ("models", "BrushShape"),
    "MirrorAxis": ("models", "MirrorAxis"),
    "InvalidEnumError": ("models", "InvalidEnumError"),
    "axial_to_pixel": ("map.coordinates", "axial_to_pixel"),
    "pixel_to_hex": ("map.coordinates", "pixel_to_hex"),
    "hex_distance": ("map.coordinates", "hex_distance"),
    "hexes_in_range": ("map.coordinates", "hexes_in_range"),
    "brush_hexes": ("map.brush", "brush_hexes"),
    "flood_fill": ("map.flood_fill", "flood_fill"),
    "FillMatcher": ("map.flood_fill", "FillMatcher"),
    "capture": ("map.patterns", "capture"),
    "paste": ("map.patterns", "paste"),
    "preview_paste": ("map.patterns", "preview_paste"),
    "transform": ("map.patterns", "transform"),
    "hex_visibility": ("exploration", "hex_visibility"),
    "ExplorationState": ("exploration", "ExplorationState"),
    "TemplateLibrary": ("templates", "TemplateLibrary"),
    "generate_biome": ("biomes", "generate_biome"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
