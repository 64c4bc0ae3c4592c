import base64
from dataclasses import replace

import pytest

from cubecraft.games import (
    ARKHAM_CONFIG,
    BUILTIN_GAMES,
    HEARTHSTONE_CONFIG,
    MTG_CONFIG,
    POKEMON_CONFIG,
    YUGIOH_CONFIG,
    GameRegistry,
    default_registry,
    get_default_game_config,
    get_game_config,
)
from cubecraft.games.hearthstone import (
    HERO_DBF_IDS,
    dominant_class,
    encode_varint,
    generate_deck_code,
)
from cubecraft.games.yugioh import generate_ydk, is_extra_deck
from cubecraft.models.card import Card
from cubecraft.models.cube import CubeCard
from cubecraft.models.failure import CubeValidationError, NotFoundError


class TestGameRegistry:
    def test_builtin_games_registered(self) -> None:
        assert default_registry.ids()[:5] == ["yugioh", "mtg", "pokemon", "hearthstone", "arkham"]
        assert len(BUILTIN_GAMES) == 5

    def test_get_unknown_game_lists_available(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            get_game_config("chess")
        assert "yugioh" in (exc_info.value.detail or "")

    def test_default_game(self) -> None:
        assert get_default_game_config().id == "yugioh"

    def test_register_and_unregister(self) -> None:
        registry = GameRegistry()
        registry.register(YUGIOH_CONFIG)
        assert "yugioh" in registry
        assert len(registry) == 1
        assert registry.unregister("yugioh") is True
        assert registry.unregister("yugioh") is False
        assert registry.get_or_none("yugioh") is None

    def test_register_overwrites(self) -> None:
        registry = GameRegistry()
        registry.register(YUGIOH_CONFIG)
        registry.register(replace(YUGIOH_CONFIG, name="Yu-Gi-Oh! (Goat)"))
        assert registry.get("yugioh").name == "Yu-Gi-Oh! (Goat)"
        assert len(registry) == 1

    def test_rejects_config_without_zones(self) -> None:
        registry = GameRegistry()
        with pytest.raises(CubeValidationError, match="at least one deck zone"):
            registry.register(replace(YUGIOH_CONFIG, id="empty", deck_zones=()))

    def test_rejects_duplicate_zone_ids(self) -> None:
        registry = GameRegistry()
        main = YUGIOH_CONFIG.deck_zones[0]
        with pytest.raises(CubeValidationError, match="duplicate zone ids"):
            registry.register(replace(YUGIOH_CONFIG, id="dupes", deck_zones=(main, main)))


class TestDefaultDuplicateLimits:
    @pytest.mark.parametrize(
        ("config", "limit"),
        [(YUGIOH_CONFIG, None), (MTG_CONFIG, None), (POKEMON_CONFIG, None),
         (HEARTHSTONE_CONFIG, 2), (ARKHAM_CONFIG, 2)],
    )  # fmt: skip
    def test_main_zone_copy_limit(self, config, limit) -> None:
        assert config.default_duplicate_limit == limit


class TestYugioh:
    def test_extra_deck_detection(self) -> None:
        assert is_extra_deck(Card(id=1, name="Decode Talker", type="Link Monster"))
        assert is_extra_deck(Card(id=2, name="Stardust Dragon", type="Synchro Monster"))
        assert not is_extra_deck(Card(id=3, name="Dark Magician", type="Normal Monster"))

    def test_generate_ydk(self) -> None:
        cards = [
            Card(id=46986414, name="Dark Magician", type="Normal Monster"),
            Card(id=1861629, name="Decode Talker", type="Link Monster"),
            Card(id=83764718, name="Monster Reborn", type="Spell Card"),
        ]
        ydk = generate_ydk(cards, YUGIOH_CONFIG.deck_zones)
        assert ydk == (
            "#created by CubeCraft\n#main\n46986414\n83764718\n#extra\n1861629\n!side\n"
        )

    def test_generate_ydk_honors_zone_hints(self) -> None:
        reborn = Card(id=83764718, name="Monster Reborn", type="Spell Card")
        cards = [CubeCard("a", reborn, zone="side"), CubeCard("b", reborn)]
        ydk = generate_ydk(cards, YUGIOH_CONFIG.deck_zones)
        assert ydk.endswith("#extra\n!side\n83764718\n")
        assert "#main\n83764718\n" in ydk

    def test_image_urls(self) -> None:
        card = Card(id=42, name="Test")
        assert YUGIOH_CONFIG.get_image_url(card, "sm") == "/images/cards_small/42.jpg"
        assert YUGIOH_CONFIG.get_image_url(card, "lg") == "/images/cards/42.jpg"


class TestMtg:
    def test_arena_export_counts_copies(self) -> None:
        bolt = Card(id="bolt", name="Lightning Bolt", type="Instant")
        forest = Card(id="forest", name="Forest", type="Basic Land - Forest")
        export = MTG_CONFIG.export_format("arena")
        assert export is not None
        assert export.generate([bolt, forest, bolt], MTG_CONFIG.deck_zones) == (
            "2 Lightning Bolt\n1 Forest"
        )

    def test_basic_lands_available(self) -> None:
        assert [land.name for land in MTG_CONFIG.basic_resources] == [
            "Plains", "Island", "Swamp", "Mountain", "Forest",
        ]  # fmt: skip

    def test_scryfall_image_url(self) -> None:
        card = Card(id="x", name="Test", attributes={"scryfallId": "abcdef"})
        assert MTG_CONFIG.get_image_url(card, "sm") == (
            "https://cards.scryfall.io/small/front/a/b/abcdef.jpg"
        )


class TestPokemon:
    def test_ptcgo_export(self) -> None:
        pikachu = Card(
            id="swsh1-1", name="Pikachu", type="Pokemon - Basic",
            attributes={"setId": "swsh1", "setNumber": "65"},
        )  # fmt: skip
        unknown = Card(id="promo", name="Mystery Card", type="Trainer")
        export = POKEMON_CONFIG.export_format("ptcgo")
        assert export is not None
        assert export.generate([pikachu, pikachu, unknown], POKEMON_CONFIG.deck_zones) == (
            "2 Pikachu swsh1 65\n1 Mystery Card UNK 0"
        )

    def test_basic_energy_numbers(self) -> None:
        energies = POKEMON_CONFIG.basic_resources
        assert energies[0].id == "grass-energy"
        assert energies[0].attributes["setNumber"] == "164"

    def test_hires_image_for_large_size(self) -> None:
        card = Card(id="x", name="X", attributes={"setId": "base1", "setNumber": "4/102"})
        assert POKEMON_CONFIG.get_image_url(card, "lg") == (
            "https://images.pokemontcg.io/base1/4_hires.png"
        )


class TestHearthstone:
    def test_encode_varint(self) -> None:
        assert encode_varint(0) == b"\x00"
        assert encode_varint(127) == b"\x7f"
        assert encode_varint(128) == b"\x80\x01"
        assert encode_varint(637) == b"\xfd\x04"

    def test_dominant_class_ignores_neutral(self) -> None:
        cards = [
            Card(id=1, name="A", attributes={"cardClass": "NEUTRAL"}),
            Card(id=2, name="B", attributes={"cardClass": "NEUTRAL"}),
            Card(id=3, name="C", attributes={"cardClass": "WARRIOR"}),
        ]
        assert dominant_class(cards) == "WARRIOR"

    def test_dominant_class_defaults_to_mage(self) -> None:
        assert dominant_class([Card(id=1, name="A", attributes={"cardClass": "NEUTRAL"})]) == "MAGE"

    def test_deck_code_layout(self) -> None:
        single = Card(id=1, name="Single", attributes={"dbfId": 100})
        double = Card(id=2, name="Double", attributes={"dbfId": 200})
        code = generate_deck_code([single, double, double], "WARRIOR")
        payload = base64.b64decode(code)
        assert payload == bytes(
            [0, 1, 1, 1, HERO_DBF_IDS["WARRIOR"], 1, 100, 1]
            + list(encode_varint(200))
            + [0]
        )

    def test_deck_code_export_text(self) -> None:
        export = HEARTHSTONE_CONFIG.export_format("deckcode")
        assert export is not None
        text = export.generate([Card(id=1, name="A", attributes={"dbfId": 5})], ())
        assert text.startswith("### CubeCraft Draft Deck\n# Class: MAGE\n# Format: Wild\n")

    def test_card_list_sorted_by_name(self) -> None:
        export = HEARTHSTONE_CONFIG.export_format("list")
        assert export is not None
        cards = [Card(id=1, name="Zap"), Card(id=2, name="Arcane Shot"), Card(id=1, name="Zap")]
        assert export.generate(cards, ()) == "1x Arcane Shot\n2x Zap"


class TestArkham:
    def test_arkhamdb_export(self) -> None:
        export = ARKHAM_CONFIG.export_format("arkhamdb")
        assert export is not None
        knife = Card(id="01086", name="Knife", attributes={"code": "01086"})
        assert export.generate([knife, knife], ()) == "2x Knife (01086)"

    def test_image_url_uses_code(self) -> None:
        card = Card(id="01086", name="Knife")
        assert ARKHAM_CONFIG.get_image_url(card, "md") == (
            "https://arkhamdb.com/bundles/cards/01086.png"
        )
