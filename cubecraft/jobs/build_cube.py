"""
Build a bundled cube file from a score CSV.

Reads <cubes_dir>/<cube>.csv ("ID,Score" or "ID,Name,Score"), resolves every
card from a local catalog file or, for Yu-Gi-Oh!, from the YGOPRODeck API,
and writes <cubes_dir>/<cube>.json in the format StaticCubeStore serves.
The CSV is rewritten with card names filled in.
"""

import argparse
import asyncio
import csv
import io
import json
import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import httpx

from cubecraft.config import DEFAULT_EXPORT_SCORE, settings
from cubecraft.models.card import Card
from cubecraft.services.catalog import parse_catalog

logger = logging.getLogger(__name__)

YGOPRODECK_API = "https://db.ygoprodeck.com/api/v7/cardinfo.php"
BATCH_SIZE = 50
BATCH_DELAY_SECONDS = 0.1
CUBE_FILE_VERSION = 1

# Fields kept from YGOPRODeck; image URLs are derived from the id at runtime
YUGIOH_FIELDS = ("atk", "def", "level", "attribute", "race", "linkval", "archetype")


def parse_score_csv(content: str) -> list[tuple[str, int]]:
    """
    Parse a score CSV into (card id, score) pairs, in file order.

    The header row is optional. Missing or unparseable scores default to 50;
    rows whose id is blank are skipped.
    """
    rows = [row for row in csv.reader(io.StringIO(content.lstrip("\ufeff"))) if row]
    if not rows:
        return []

    header = [cell.strip().casefold() for cell in rows[0]]
    has_header = bool(header) and header[0] == "id"
    score_column = 2 if has_header and "name" in header else 1

    scores = []
    for row in rows[1:] if has_header else rows:
        card_id = row[0].strip()
        if not card_id:
            continue
        raw_score = row[score_column].strip() if len(row) > score_column else ""
        try:
            score = int(raw_score)
        except ValueError:
            score = DEFAULT_EXPORT_SCORE
        scores.append((card_id, score))
    return scores


def format_score_csv(scores: Sequence[tuple[str, int]], cards: dict[str, Card]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["ID", "Name", "Score"])
    for card_id, score in scores:
        card = cards.get(card_id)
        writer.writerow([card_id, card.name if card else "Unknown Card", score])
    return buffer.getvalue()


def card_from_ygoprodeck(data: dict[str, Any]) -> Card:
    attributes = {field: data[field] for field in YUGIOH_FIELDS if data.get(field) is not None}
    return Card(
        id=data["id"],
        name=data.get("name", ""),
        type=data.get("type", ""),
        description=data.get("desc", ""),
        attributes=attributes,
    )


async def fetch_yugioh_cards(
    card_ids: Sequence[str],
    client: httpx.AsyncClient,
    delay: float = BATCH_DELAY_SECONDS,
) -> tuple[dict[str, Card], list[str]]:
    """
    Fetch cards from YGOPRODeck in batches.

    A failed batch is logged and its ids reported as missing; the rest of
    the cube is still built.

    Returns:
        Cards keyed by id, and the ids that could not be fetched.
    """
    cards: dict[str, Card] = {}
    missing: list[str] = []
    for start in range(0, len(card_ids), BATCH_SIZE):
        batch = list(card_ids[start : start + BATCH_SIZE])
        try:
            response = await client.get(YGOPRODECK_API, params={"id": ",".join(batch)})
            response.raise_for_status()
            for data in response.json().get("data", []):
                card = card_from_ygoprodeck(data)
                cards[card.key] = card
        except httpx.HTTPError as e:
            logger.warning("Batch starting at %d failed: %s", start, e)
        missing.extend(card_id for card_id in batch if card_id not in cards)
        if start + BATCH_SIZE < len(card_ids):
            await asyncio.sleep(delay)
    return cards, missing


def load_catalog_cards(path: Path) -> dict[str, Card]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return {card.key: card for card in parse_catalog(data)}


def _cube_entry(card: Card, score: int, game_id: str) -> dict[str, Any]:
    if game_id == "yugioh":
        return {
            "id": card.id,
            "name": card.name,
            "type": card.type,
            "desc": card.description,
            **dict(card.attributes),
            "score": score,
        }
    entry = card.to_dict()
    entry["score"] = score
    return entry


def build_cube_payload(
    cube_id: str,
    name: str,
    game_id: str,
    scores: Iterable[tuple[str, int]],
    cards: dict[str, Card],
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    """
    Assemble the cube file body.

    Cards are stored once in cardMap keyed by id; ids without a card are
    left out. Yu-Gi-Oh! cubes use the flat card layout older cube files
    already use; other games keep attributes nested.
    """
    card_map = {}
    for card_id, score in scores:
        card = cards.get(card_id)
        if card is not None:
            card_map[card_id] = _cube_entry(card, score, game_id)
    return {
        "id": cube_id,
        "name": name,
        "cardCount": len(card_map),
        "generatedAt": (generated_at or datetime.now(UTC)).isoformat(),
        "gameId": game_id,
        "version": CUBE_FILE_VERSION,
        "cardMap": card_map,
    }


async def run_build(
    cube_id: str,
    cubes_dir: Path,
    game_id: str,
    name: str | None = None,
    catalog_path: Path | None = None,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """
    Build one cube file and return its path.

    Raises:
        FileNotFoundError: If the score CSV does not exist
        ValueError: If no card source is available for the game
    """
    csv_path = cubes_dir / f"{cube_id}.csv"
    json_path = cubes_dir / f"{cube_id}.json"
    if not csv_path.is_file():
        raise FileNotFoundError(f"Score CSV not found: {csv_path}")

    scores = parse_score_csv(csv_path.read_text(encoding="utf-8"))
    card_ids = [card_id for card_id, _ in scores]
    logger.info("Building cube %s from %d card ids", cube_id, len(card_ids))

    if catalog_path is not None:
        cards = load_catalog_cards(catalog_path)
        missing = [card_id for card_id in card_ids if card_id not in cards]
    elif game_id == "yugioh":
        if client is None:
            async with httpx.AsyncClient(timeout=30.0) as own_client:
                cards, missing = await fetch_yugioh_cards(card_ids, own_client)
        else:
            cards, missing = await fetch_yugioh_cards(card_ids, client)
    else:
        raise ValueError(f"A --catalog file is required to build {game_id} cubes")

    if missing:
        logger.warning("%d cards could not be resolved: %s", len(missing), ", ".join(missing))

    payload = build_cube_payload(cube_id, name or cube_id, game_id, scores, cards)
    json_path.write_text(json.dumps(payload, separators=(",", ":")), encoding="utf-8")
    csv_path.write_text(format_score_csv(scores, cards), encoding="utf-8")
    logger.info("Saved %d cards to %s", payload["cardCount"], json_path)
    return json_path


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a bundled cube file from a score CSV.")
    parser.add_argument("cube", help="Cube id; reads <cubes-dir>/<cube>.csv")
    parser.add_argument("--cubes-dir", type=Path, default=Path(settings.cubes_dir))
    parser.add_argument("--game", default=settings.default_game_id)
    parser.add_argument("--name", help="Display name (defaults to the cube id)")
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Catalog JSON to resolve cards from instead of the YGOPRODeck API",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)
    asyncio.run(run_build(args.cube, args.cubes_dir, args.game, args.name, args.catalog))


if __name__ == "__main__":
    main()
