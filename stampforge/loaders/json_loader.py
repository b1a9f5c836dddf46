"""Load card designs from JSON definitions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from ..domain.cards import CardCatalog, CardDesign, SlotPosition, StampStyle


def load_catalog_from_json(path: str | Path) -> CardCatalog:
    """Read, validate and freeze a catalog JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_catalog_dict(data)


def parse_catalog_dict(data: dict[str, Any]) -> CardCatalog:
    """Parse a JSON dict (already decoded) into a catalog."""
    errors = validate_catalog_dict(data)
    if errors:
        raise ValueError(_format_errors("Catalog validation failed", errors))
    return CardCatalog(parse_card(entry) for entry in data["cards"])


def parse_card(entry: dict[str, Any]) -> CardDesign:
    style_data = entry.get("style", {})
    return CardDesign(
        card_id=entry["id"],
        name=entry["name"],
        template=entry["template"],
        slots=tuple(SlotPosition(cx=int(slot["cx"]), cy=int(slot["cy"])) for slot in entry["slots"]),
        style=StampStyle(
            width=int(style_data.get("w", 90)),
            height=int(style_data.get("h", 90)),
            dx=int(style_data.get("dx", 0)),
            dy=int(style_data.get("dy", 0)),
        ),
    )


def validate_catalog_file(path: str | Path) -> list[str]:
    """Validate catalog JSON file and return a list of errors."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return validate_catalog_dict(data)


def validate_catalog_dict(data: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    cards_raw = data.get("cards") if isinstance(data, dict) else None
    if not isinstance(cards_raw, list) or not cards_raw:
        return ["Catalog must contain non-empty 'cards' array."]

    card_ids: set[str] = set()
    for idx, entry in enumerate(cards_raw, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Card #{idx} must be an object.")
            continue
        card_id = entry.get("id")
        if not isinstance(card_id, str) or not card_id.strip():
            errors.append(f"Card #{idx} must define non-empty 'id'.")
            continue
        if card_id in card_ids:
            errors.append(f"Card id '{card_id}' defined multiple times.")
        card_ids.add(card_id)

        for field_name in ("name", "template"):
            value = entry.get(field_name)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"Card '{card_id}' must define non-empty '{field_name}'.")

        slots = entry.get("slots")
        if not isinstance(slots, list) or not slots:
            errors.append(f"Card '{card_id}' must define non-empty 'slots' array.")
        else:
            for slot_idx, slot in enumerate(slots):
                if not isinstance(slot, dict) or not all(
                    _is_int(slot.get(axis)) for axis in ("cx", "cy")
                ):
                    errors.append(f"Card '{card_id}' slot #{slot_idx} must define integer 'cx' and 'cy'.")

        style = entry.get("style")
        if style is not None:
            if not isinstance(style, dict):
                errors.append(f"Card '{card_id}' style must be an object.")
                continue
            for size_key in ("w", "h"):
                value = style.get(size_key)
                if value is not None and (not _is_int(value) or value <= 0):
                    errors.append(f"Card '{card_id}' style '{size_key}' must be a positive integer.")
            for offset_key in ("dx", "dy"):
                value = style.get(offset_key)
                if value is not None and not _is_int(value):
                    errors.append(f"Card '{card_id}' style '{offset_key}' must be an integer.")

    return errors


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
