"""Validation utilities for StampForge applications."""

from __future__ import annotations

from .app import BotApp


def validate_app(app: BotApp) -> list[str]:
    """Return list of validation errors discovered in configured app."""
    errors: list[str] = []
    stamps = app.config.stamps

    if not len(app.catalog):
        errors.append("No card designs registered in application.")
    if stamps.default_card not in app.catalog:
        errors.append(f"Default card '{stamps.default_card}' is not in the catalog.")
    if stamps.goal <= 0:
        errors.append(f"Stamp goal must be positive, got '{stamps.goal}'.")
    if stamps.leaderboard_size <= 0:
        errors.append(f"Leaderboard size must be positive, got '{stamps.leaderboard_size}'.")

    glyph_checked = False
    for design in app.catalog.iter_designs():
        if design.slot_count != stamps.goal:
            errors.append(
                f"Card '{design.card_id}' has {design.slot_count} slots but the goal is {stamps.goal}."
            )
        if design.style.width <= 0 or design.style.height <= 0:
            errors.append(f"Card '{design.card_id}' has non-positive stamp size.")

        template, glyph = app.renderer.asset_paths(design)
        if not template.exists():
            errors.append(f"Card '{design.card_id}' template '{template}' not found.")
        if not glyph_checked:
            glyph_checked = True
            if not glyph.exists():
                errors.append(f"Stamp glyph '{glyph}' not found.")

    admin = app.config.admin
    if admin.log_chat_id is not None and admin.log_chat_id == admin.completed_chat_id:
        errors.append("Log chat and completion chat must differ.")

    return errors


__all__ = ["validate_app"]
