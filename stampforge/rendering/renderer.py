"""Composite stamp glyphs onto card templates with Pillow."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image

from ..domain.cards import CardCatalog, CardDesign
from ..domain.exceptions import RenderError

logger = logging.getLogger(__name__)

DEFAULT_GLYPH = "stamp.png"


class CardRenderer:
    """Draw ``min(count, slots)`` stamps onto a design's template.

    Output depends only on the design, the count and the asset files, so
    the same inputs always encode to the same PNG bytes.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        assets_dir: str | Path,
        *,
        glyph: str = DEFAULT_GLYPH,
    ) -> None:
        self._catalog = catalog
        self._assets_dir = Path(assets_dir)
        self._glyph_path = self._resolve(glyph)
        self._images: dict[Path, Image.Image] = {}
        self._glyphs: dict[tuple[int, int], Image.Image] = {}

    def render_card(self, card_id: str, count: int) -> bytes:
        return self.render(self._catalog.lookup(card_id), count)

    def render(self, design: CardDesign, count: int) -> bytes:
        template = self._load(self._resolve(design.template))
        style = design.style
        glyph = self._glyph(style.width, style.height)

        canvas = template.copy()
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        filled = min(max(count, 0), design.slot_count)
        for slot in design.slots[:filled]:
            left = round(slot.cx - style.width / 2 + style.dx)
            top = round(slot.cy - style.height / 2 + style.dy)
            layer.alpha_composite(
                glyph,
                dest=(max(left, 0), max(top, 0)),
                source=(max(-left, 0), max(-top, 0)),
            )
        canvas = Image.alpha_composite(canvas, layer)

        buffer = io.BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()

    def asset_paths(self, design: CardDesign) -> tuple[Path, Path]:
        """Return the template and glyph paths a design renders from."""
        return self._resolve(design.template), self._glyph_path

    def _glyph(self, width: int, height: int) -> Image.Image:
        key = (width, height)
        if key not in self._glyphs:
            source = self._load(self._glyph_path)
            self._glyphs[key] = source.resize((width, height), Image.Resampling.LANCZOS)
        return self._glyphs[key]

    def _load(self, path: Path) -> Image.Image:
        image = self._images.get(path)
        if image is not None:
            return image
        try:
            with Image.open(path) as source:
                image = source.convert("RGBA")
        except OSError as exc:
            logger.error("Unable to load card asset %s: %s", path, exc)
            raise RenderError(f"Unable to load asset '{path.name}'") from exc
        self._images[path] = image
        return image

    def _resolve(self, name: str) -> Path:
        path = Path(name)
        return path if path.is_absolute() else self._assets_dir / path
