"""Tests for the cube build job."""

import json
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest
import respx

from cubecraft.jobs.build_cube import (
    BATCH_SIZE,
    YGOPRODECK_API,
    build_cube_payload,
    card_from_ygoprodeck,
    fetch_yugioh_cards,
    format_score_csv,
    parse_args,
    parse_score_csv,
    run_build,
)
from cubecraft.models.card import Card
from cubecraft.services.persistence import StaticCubeStore

DARK_MAGICIAN_JSON = {
    "id": 46986414,
    "name": "Dark Magician",
    "type": "Normal Monster",
    "desc": "The ultimate wizard.",
    "atk": 2500,
    "def": 2100,
    "level": 7,
    "race": "Spellcaster",
    "attribute": "DARK",
    "card_images": [{"id": 46986414}],
}


class TestParseScoreCsv:
    def test_id_score_without_header(self) -> None:
        assert parse_score_csv("1,90\n2,40\n") == [("1", 90), ("2", 40)]

    def test_id_name_score_with_header(self) -> None:
        content = "ID,Name,Score\n46986414,Dark Magician,75\n"
        assert parse_score_csv(content) == [("46986414", 75)]

    def test_id_score_with_header(self) -> None:
        assert parse_score_csv("id,score\n7,60\n") == [("7", 60)]

    def test_byte_order_mark(self) -> None:
        assert parse_score_csv("\ufeffID,Score\n7,60\n") == [("7", 60)]

    def test_bad_or_missing_score_defaults(self) -> None:
        """Unparseable and missing scores fall back to the default score."""
        assert parse_score_csv("1,high\n2\n") == [("1", 50), ("2", 50)]

    def test_blank_rows_and_ids_skipped(self) -> None:
        assert parse_score_csv("1,90\n\n ,30\n") == [("1", 90)]

    def test_empty(self) -> None:
        assert parse_score_csv("") == []


class TestFormatScoreCsv:
    def test_fills_names(self) -> None:
        cards = {"1": Card(id=1, name="Pot of Greed")}

        content = format_score_csv([("1", 90), ("2", 40)], cards)

        assert content == "ID,Name,Score\n1,Pot of Greed,90\n2,Unknown Card,40\n"

    def test_round_trips_through_parser(self) -> None:
        content = format_score_csv([("1", 90)], {"1": Card(id=1, name="A, B")})
        assert parse_score_csv(content) == [("1", 90)]


class TestCardFromYgoprodeck:
    def test_keeps_known_fields(self) -> None:
        card = card_from_ygoprodeck(DARK_MAGICIAN_JSON)

        assert card.key == "46986414"
        assert card.description == "The ultimate wizard."
        assert card.attributes == {
            "atk": 2500,
            "def": 2100,
            "level": 7,
            "attribute": "DARK",
            "race": "Spellcaster",
        }


class TestBuildCubePayload:
    def test_yugioh_flat_layout(self) -> None:
        cards = {"46986414": card_from_ygoprodeck(DARK_MAGICIAN_JSON)}

        payload = build_cube_payload(
            "starter",
            "Starter",
            "yugioh",
            [("46986414", 75), ("999", 10)],
            cards,
            generated_at=datetime(2024, 1, 1, tzinfo=UTC),
        )

        assert payload["cardCount"] == 1
        assert payload["generatedAt"] == "2024-01-01T00:00:00+00:00"
        assert payload["gameId"] == "yugioh"
        entry = payload["cardMap"]["46986414"]
        assert entry["desc"] == "The ultimate wizard."
        assert entry["atk"] == 2500
        assert entry["score"] == 75

    def test_other_games_nest_attributes(self) -> None:
        cards = {"bolt": Card(id="bolt", name="Lightning Bolt", attributes={"cmc": 1})}

        payload = build_cube_payload("burn", "Burn", "mtg", [("bolt", 90)], cards)

        entry = payload["cardMap"]["bolt"]
        assert entry["attributes"] == {"cmc": 1}
        assert entry["score"] == 90


class TestFetchYugiohCards:
    @respx.mock
    async def test_fetches_batch(self) -> None:
        route = respx.get(YGOPRODECK_API).mock(
            return_value=httpx.Response(200, json={"data": [DARK_MAGICIAN_JSON]})
        )

        async with httpx.AsyncClient() as client:
            cards, missing = await fetch_yugioh_cards(["46986414", "1"], client, delay=0)

        assert list(cards) == ["46986414"]
        assert missing == ["1"]
        assert route.calls.last.request.url.params["id"] == "46986414,1"

    @respx.mock
    async def test_splits_into_batches(self) -> None:
        route = respx.get(YGOPRODECK_API).mock(
            return_value=httpx.Response(200, json={"data": []})
        )
        card_ids = [str(n) for n in range(BATCH_SIZE + 1)]

        async with httpx.AsyncClient() as client:
            _cards, missing = await fetch_yugioh_cards(card_ids, client, delay=0)

        assert route.call_count == 2
        assert missing == card_ids

    @respx.mock
    async def test_failed_batch_reported_missing(self) -> None:
        """HTTP errors do not abort the build."""
        respx.get(YGOPRODECK_API).mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as client:
            cards, missing = await fetch_yugioh_cards(["46986414"], client, delay=0)

        assert cards == {}
        assert missing == ["46986414"]


class TestRunBuild:
    async def test_builds_from_catalog(self, tmp_path: Path) -> None:
        (tmp_path / "burn.csv").write_text("bolt,90\nmissing,20\n")
        catalog_path = tmp_path / "mtg.json"
        catalog_path.write_text(
            json.dumps([{"id": "bolt", "name": "Lightning Bolt", "type": "Instant"}])
        )

        path = await run_build("burn", tmp_path, "mtg", name="Burn", catalog_path=catalog_path)

        payload = json.loads(path.read_text())
        assert payload["name"] == "Burn"
        assert list(payload["cardMap"]) == ["bolt"]
        assert (tmp_path / "burn.csv").read_text() == (
            "ID,Name,Score\nbolt,Lightning Bolt,90\nmissing,Unknown Card,20\n"
        )

    async def test_built_cube_is_loadable(self, tmp_path: Path) -> None:
        """The written file is served by the bundled cube store."""
        (tmp_path / "burn.csv").write_text("bolt,90\n")
        catalog_path = tmp_path / "mtg.json"
        catalog_path.write_text(
            json.dumps({"cards": [{"id": "bolt", "name": "Lightning Bolt", "type": "Instant"}]})
        )

        await run_build("burn", tmp_path, "mtg", catalog_path=catalog_path)
        record = await StaticCubeStore(tmp_path).load("burn")

        assert record.game_id == "mtg"
        assert record.name == "burn"
        assert record.entries[0].score == 90

    @respx.mock
    async def test_builds_yugioh_from_api(self, tmp_path: Path) -> None:
        respx.get(YGOPRODECK_API).mock(
            return_value=httpx.Response(200, json={"data": [DARK_MAGICIAN_JSON]})
        )
        (tmp_path / "starter.csv").write_text("ID,Score\n46986414,75\n")

        async with httpx.AsyncClient() as client:
            path = await run_build("starter", tmp_path, "yugioh", client=client)

        record = await StaticCubeStore(tmp_path).load("starter")
        assert path.name == "starter.json"
        assert record.entries[0].card.name == "Dark Magician"
        assert record.entries[0].card.attributes["atk"] == 2500

    async def test_missing_csv(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            await run_build("nope", tmp_path, "yugioh")

    async def test_other_games_need_catalog(self, tmp_path: Path) -> None:
        (tmp_path / "burn.csv").write_text("bolt,90\n")

        with pytest.raises(ValueError, match="--catalog"):
            await run_build("burn", tmp_path, "mtg")


class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args(["starter"])

        assert args.cube == "starter"
        assert args.game == "yugioh"
        assert args.catalog is None

    def test_options(self) -> None:
        args = parse_args(["burn", "--game", "mtg", "--catalog", "mtg.json", "--cubes-dir", "x"])

        assert args.game == "mtg"
        assert args.catalog == Path("mtg.json")
        assert args.cubes_dir == Path("x")
