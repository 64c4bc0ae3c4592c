import pytest

from cubecraft.models.card import Card
from cubecraft.services.catalog import InMemoryCardCatalog
from cubecraft.services.cube_builder import CubeBuilder


@pytest.fixture
def yugioh_cards() -> list[Card]:
    """A small Yu-Gi-Oh! pool covering main deck, extra deck, spells and traps."""
    return [
        Card(
            id=89631139,
            name="Blue-Eyes White Dragon",
            type="Normal Monster",
            description="This legendary dragon is a powerful engine of destruction.",
            score=92,
            attributes={"atk": 3000, "def": 2500, "level": 8, "attribute": "LIGHT", "race": "Dragon"},
        ),
        Card(
            id=46986414,
            name="Dark Magician",
            type="Normal Monster",
            description="The ultimate wizard in terms of attack and defense.",
            score=75,
            attributes={"atk": 2500, "def": 2100, "level": 7, "attribute": "DARK", "race": "Spellcaster"},
        ),
        Card(
            id=14558127,
            name="Ash Blossom & Joyous Spring",
            type="Tuner Effect Monster",
            description="When a card or effect is activated that includes any of these effects...",
            score=88,
            attributes={"atk": 0, "def": 1800, "level": 3, "attribute": "FIRE", "race": "Zombie"},
        ),
        Card(
            id=1861629,
            name="Decode Talker",
            type="Link Monster",
            description="2+ Effect Monsters",
            score=70,
            attributes={"atk": 2300, "linkval": 3, "attribute": "DARK", "race": "Cyberse"},
        ),
        Card(
            id=83764718,
            name="Monster Reborn",
            type="Spell Card",
            description="Target 1 monster in either GY; Special Summon it.",
            score=85,
            attributes={"race": "Normal"},
        ),
        Card(
            id=44095762,
            name="Mirror Force",
            type="Trap Card",
            description="When an opponent's monster declares an attack: Destroy all your opponent's Attack Position monsters.",
            attributes={"race": "Normal"},
        ),
    ]


@pytest.fixture
def catalog(yugioh_cards: list[Card]) -> InMemoryCardCatalog:
    return InMemoryCardCatalog({"yugioh": yugioh_cards})


@pytest.fixture
def builder(catalog: InMemoryCardCatalog) -> CubeBuilder:
    """A Yu-Gi-Oh! builder with no storage configured."""
    return CubeBuilder(catalog, game_id="yugioh")
