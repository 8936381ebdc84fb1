"""Simple entrypoint to exercise the wardrobe planner locally."""

import asyncio

from wardrobe_app.app import WardrobeApp


async def _run() -> None:
    app = WardrobeApp()
    catalog = await app.start()
    summary = catalog.wardrobe_summary()
    print(f"Loaded {summary.total_items} clothing items and {summary.total_outfits} outfits")
    for suggestion in catalog.generate_outfit_suggestions("casual", "warm"):
        names = ", ".join(item.name or item.category for item in suggestion.outfit.items)
        print(f"{suggestion.outfit.name} ({suggestion.confidence:.0%}): {names} - {suggestion.reason}")


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
