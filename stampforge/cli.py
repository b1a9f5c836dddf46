"""Command line helpers for StampForge."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console

from .app import BotApp
from .config import StampForgeConfig
from .domain.exceptions import StampForgeError
from .loaders import validate_catalog_file
from .validators import validate_app

console = Console()


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="StampForge validator")
    parser.add_argument(
        "--catalog",
        help="Path to a catalog JSON file to validate on its own",
    )
    args = parser.parse_args()

    if args.catalog:
        errors = validate_catalog_file(Path(args.catalog))
        if errors:
            console.print("[bold red]Catalog errors:[/bold red]")
            for err in errors:
                console.print(f"- {err}")
            sys.exit(1)
        console.print("Catalog is valid ✅")
        return

    app = BotApp(StampForgeConfig.from_env())
    issues = validate_app(app)
    if issues:
        console.print("[bold red]Configuration errors:[/bold red]")
        for issue in issues:
            console.print(f"- {issue}")
        sys.exit(1)
    console.print("Bot configuration is valid ✅")


def run_render() -> None:
    parser = argparse.ArgumentParser(description="Render a stamp card to a PNG file")
    parser.add_argument("card_id", help="Card design identifier, e.g. og")
    parser.add_argument("count", type=int, help="Number of stamps to draw")
    parser.add_argument("-o", "--output", default="stamp-card.png", help="Output PNG path")
    args = parser.parse_args()

    if args.count < 0:
        parser.error("count must be non-negative")

    app = BotApp(StampForgeConfig.from_env())
    try:
        image = app.renderer.render_card(args.card_id, args.count)
    except StampForgeError as exc:
        console.print(f"[bold red]Render failed:[/bold red] {exc}")
        sys.exit(1)
    output = Path(args.output)
    output.write_bytes(image)
    console.print(f"Wrote {output} ({args.count}/{app.engine.goal})")
