"""Terrain templates: reusable patterns with metadata.

Built-in templates ship in ``data/templates.yaml``; custom ones are created
from a captured selection. Placement goes through the same pattern
transforms as copy/paste.
"""
from __future__ import annotations

import os
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import yaml

from .map.patterns import Placement, apply_to_cells, paste, transform
from .models import (
    AxialCoordinate,
    CellMap,
    HexCell,
    HexCellContent,
    MapDataError,
    MapDimensions,
    MirrorAxis,
    Pattern,
    coerce_enum,
)


class TemplateCategory(str, Enum):
    BIOME = "biome"
    CAMPAIGN = "campaign"
    STRUCTURE = "structure"
    CUSTOM = "custom"


class SortKey(str, Enum):
    NAME = "name"
    CREATED = "created"
    UPDATED = "updated"


_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class TerrainTemplate:
    id: str
    name: str
    pattern: Pattern
    description: str = ""
    category: TemplateCategory = TemplateCategory.CUSTOM
    tags: Tuple[str, ...] = ()
    author: Optional[str] = None
    version: str = "1.0.0"
    builtin: bool = False
    created_at: datetime = _EPOCH
    updated_at: datetime = _EPOCH

    @property
    def dimensions(self) -> MapDimensions:
        return self.pattern.dimensions

    def to_dict(self) -> Dict[str, Any]:
        cells = []
        for coord, content in self.pattern:
            cells.append({"q": coord.q, "r": coord.r, **content.to_dict()})
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "tags": list(self.tags),
            "author": self.author,
            "version": self.version,
            "builtin": self.builtin,
            "dimensions": self.dimensions.to_dict(),
            "cells": cells,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, builtin: bool = False) -> "TerrainTemplate":
        try:
            template_id = str(data["id"])
            name = str(data["name"])
        except KeyError as exc:
            raise MapDataError(f"Template is missing {exc.args[0]!r}") from None
        entries: Dict[AxialCoordinate, HexCellContent] = {}
        for raw in data.get("cells") or []:
            entries[AxialCoordinate.from_dict(raw)] = HexCellContent.from_dict(raw)
        pattern = Pattern(
            cells=entries,
            dimensions=MapDimensions.from_dict(data.get("dimensions") or {"width": 0, "height": 0}),
        )
        return cls(
            id=template_id,
            name=name,
            pattern=pattern,
            description=data.get("description", ""),
            category=coerce_enum(TemplateCategory, data.get("category", "custom")),
            tags=tuple(data.get("tags") or ()),
            author=data.get("author"),
            version=str(data.get("version", "1.0.0")),
            builtin=builtin,
        )


def _data_path() -> str:
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "data", "templates.yaml"))


@lru_cache()
def load_builtin_templates() -> Tuple[TerrainTemplate, ...]:
    """Load the templates bundled with the package."""
    path = _data_path()
    if not os.path.exists(path):
        return ()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return tuple(TerrainTemplate.from_dict(raw, builtin=True) for raw in data.get("templates", []))


def template_from_selection(
    pattern: Pattern,
    name: str,
    description: str = "",
    category: Union[TemplateCategory, str] = TemplateCategory.CUSTOM,
    tags: Iterable[str] = (),
    author: Optional[str] = None,
) -> TerrainTemplate:
    """Build a custom template from a captured pattern.

    Coordinates are normalised so the smallest q and r become 0.
    """
    entries = pattern.cells
    if entries:
        min_q = min(c.q for c in entries)
        min_r = min(c.r for c in entries)
        shift = AxialCoordinate(min_q, min_r)
        entries = {coord - shift: content for coord, content in entries.items()}
    now = datetime.now(timezone.utc)
    return TerrainTemplate(
        id=str(uuid.uuid4()),
        name=name,
        pattern=Pattern(cells=dict(entries), dimensions=pattern.dimensions),
        description=description,
        category=coerce_enum(TemplateCategory, category),
        tags=tuple(tags),
        author=author,
        created_at=now,
        updated_at=now,
    )


def preview_template(
    template: TerrainTemplate,
    target: AxialCoordinate,
    rotation: int = 0,
    mirror_axis: Optional[Union[MirrorAxis, str]] = None,
    scale_factor: float = 1,
) -> List[Placement]:
    """Absolute placements of ``template`` anchored at ``target``."""
    pattern = transform(template.pattern, rotation, mirror_axis, scale_factor)
    return paste(pattern, target)


def apply_template(
    template: TerrainTemplate,
    target: AxialCoordinate,
    cells: CellMap,
    dimensions: Optional[MapDimensions] = None,
    rotation: int = 0,
    mirror_axis: Optional[Union[MirrorAxis, str]] = None,
    scale_factor: float = 1,
) -> Dict[str, HexCell]:
    placements = preview_template(template, target, rotation, mirror_axis, scale_factor)
    return apply_to_cells(placements, cells, dimensions)


@dataclass
class TemplateLibrary:
    """Built-in plus custom templates, searchable by metadata."""

    custom: Dict[str, TerrainTemplate] = field(default_factory=dict)
    include_builtin: bool = True

    def all(self) -> List[TerrainTemplate]:
        builtin = list(load_builtin_templates()) if self.include_builtin else []
        return builtin + list(self.custom.values())

    def get(self, template_id: str) -> Optional[TerrainTemplate]:
        for template in self.all():
            if template.id == template_id:
                return template
        return None

    def add(self, template: TerrainTemplate) -> TerrainTemplate:
        stored = replace(template, builtin=False, updated_at=datetime.now(timezone.utc))
        self.custom[stored.id] = stored
        return stored

    def remove(self, template_id: str) -> bool:
        return self.custom.pop(template_id, None) is not None

    def by_category(self, category: Union[TemplateCategory, str]) -> List[TerrainTemplate]:
        category = coerce_enum(TemplateCategory, category)
        return [t for t in self.all() if t.category is category]

    def search(
        self,
        *,
        category: Optional[Union[TemplateCategory, str]] = None,
        tags: Iterable[str] = (),
        author: Optional[str] = None,
        term: Optional[str] = None,
        sort_by: Union[SortKey, str] = SortKey.NAME,
        descending: bool = False,
    ) -> List[TerrainTemplate]:
        templates = self.all()
        if category is not None:
            wanted = coerce_enum(TemplateCategory, category)
            templates = [t for t in templates if t.category is wanted]
        tags = list(tags)
        if tags:
            templates = [t for t in templates if any(tag in t.tags for tag in tags)]
        if author:
            needle = author.lower()
            templates = [t for t in templates if t.author and needle in t.author.lower()]
        if term:
            needle = term.lower()
            templates = [
                t for t in templates
                if needle in t.name.lower()
                or needle in t.description.lower()
                or any(needle in tag.lower() for tag in t.tags)
            ]
        sort_by = coerce_enum(SortKey, sort_by)
        if sort_by is SortKey.CREATED:
            key = lambda t: t.created_at
        elif sort_by is SortKey.UPDATED:
            key = lambda t: t.updated_at
        else:
            key = lambda t: t.name.lower()
        return sorted(templates, key=key, reverse=descending)


__all__ = [
    "SortKey",
    "TemplateCategory",
    "TemplateLibrary",
    "TerrainTemplate",
    "apply_template",
    "load_builtin_templates",
    "preview_template",
    "template_from_selection",
]
