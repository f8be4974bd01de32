"""
Curated preset word tables.

Used directly by the preset modes and as the first fallback when Gemini
is unavailable. Kept inline so the module is self-contained.
"""

import logging
import random
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from imposter.game.constants import RANDOM_CATEGORY, Difficulty

logger = logging.getLogger(__name__)

_default_rng = random.SystemRandom()

E, M, H, I = (
    Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD, Difficulty.INSANE,
)

# ── Classic presets: category -> difficulty -> words ─────────────────────

PRESET_WORDS: Dict[str, Dict[Difficulty, List[str]]] = {
    "Animals": {
        E: ["Dog", "Cat", "Cow", "Horse", "Lion", "Elephant", "Monkey"],
        M: ["Kangaroo", "Penguin", "Giraffe", "Dolphin", "Owl", "Zebra"],
        H: ["Platypus", "Pangolin", "Chameleon", "Narwhal", "Wolverine"],
        I: ["Axolotl", "Okapi", "Tardigrade", "Aye-aye", "Blobfish"],
    },
    "Food": {
        E: ["Pizza", "Burger", "Apple", "Banana", "Ice Cream", "Bread"],
        M: ["Sushi", "Taco", "Lasagna", "Pancake", "Croissant", "Curry"],
        H: ["Ratatouille", "Paella", "Bibimbap", "Ceviche", "Goulash"],
        I: ["Durian", "Haggis", "Natto", "Surströmming", "Casu Marzu"],
    },
    "Places": {
        E: ["Beach", "School", "Hospital", "Park", "Airport", "Zoo"],
        M: ["Library", "Museum", "Casino", "Lighthouse", "Stadium"],
        H: ["Observatory", "Monastery", "Submarine", "Oil Rig", "Vineyard"],
        I: ["Catacombs", "Particle Accelerator", "Seed Vault", "Bathysphere"],
    },
    "Objects": {
        E: ["Chair", "Phone", "Ball", "Book", "Umbrella", "Clock"],
        M: ["Compass", "Microscope", "Hammock", "Kettle", "Stapler"],
        H: ["Metronome", "Sextant", "Abacus", "Periscope", "Gyroscope"],
        I: ["Astrolabe", "Theremin", "Orrery", "Zoetrope", "Quipu"],
    },
    "Professions": {
        E: ["Teacher", "Doctor", "Chef", "Police Officer", "Farmer"],
        M: ["Pilot", "Firefighter", "Dentist", "Plumber", "Journalist"],
        H: ["Architect", "Pharmacist", "Translator", "Locksmith", "Actuary"],
        I: ["Sommelier", "Taxidermist", "Cartographer", "Luthier"],
    },
    "Sports": {
        E: ["Football", "Tennis", "Swimming", "Basketball", "Running"],
        M: ["Volleyball", "Badminton", "Skiing", "Boxing", "Surfing"],
        H: ["Fencing", "Curling", "Water Polo", "Archery", "Rowing"],
        I: ["Sepak Takraw", "Hurling", "Kabaddi", "Bossaball", "Pesäpallo"],
    },
}

# ── Undercover presets: category -> difficulty -> (secret, decoy) ────────

UNDERCOVER_PAIRS: Dict[str, Dict[Difficulty, List[Tuple[str, str]]]] = {
    "Food": {
        E: [("Apple", "Orange"), ("Pizza", "Burger"), ("Milk", "Juice")],
        M: [("Pancake", "Waffle"), ("Sushi", "Sashimi"), ("Taco", "Burrito")],
        H: [("Gelato", "Sorbet"), ("Baguette", "Ciabatta"),
            ("Espresso", "Ristretto")],
        I: [("Prosciutto", "Jamón"), ("Mochi", "Daifuku"),
            ("Crème Brûlée", "Flan")],
    },
    "Animals": {
        E: [("Dog", "Wolf"), ("Cat", "Tiger"), ("Duck", "Goose")],
        M: [("Alligator", "Crocodile"), ("Rabbit", "Hare"),
            ("Dolphin", "Porpoise")],
        H: [("Leopard", "Jaguar"), ("Moth", "Butterfly"), ("Seal", "Sea Lion")],
        I: [("Tortoise", "Terrapin"), ("Raven", "Crow"), ("Llama", "Alpaca")],
    },
    "Places": {
        E: [("Beach", "Pool"), ("School", "University"), ("Park", "Garden")],
        M: [("Hotel", "Hostel"), ("Museum", "Gallery"), ("Cinema", "Theater")],
        H: [("Castle", "Palace"), ("Harbor", "Marina"), ("Desert", "Tundra")],
        I: [("Fjord", "Canyon"), ("Atoll", "Archipelago"),
            ("Cathedral", "Basilica")],
    },
    "Music": {
        E: [("Guitar", "Violin"), ("Piano", "Keyboard"), ("Drum", "Tambourine")],
        M: [("Trumpet", "Trombone"), ("Flute", "Clarinet"),
            ("Cello", "Double Bass")],
        H: [("Harp", "Lyre"), ("Banjo", "Ukulele"), ("Oboe", "Bassoon")],
        I: [("Harpsichord", "Clavichord"), ("Sitar", "Veena"),
            ("Theremin", "Ondes Martenot")],
    },
    "Sports": {
        E: [("Football", "Rugby"), ("Tennis", "Badminton"),
            ("Running", "Walking")],
        M: [("Skiing", "Snowboarding"), ("Baseball", "Cricket"),
            ("Boxing", "Wrestling")],
        H: [("Squash", "Racquetball"), ("Kayaking", "Canoeing"),
            ("Bobsleigh", "Luge")],
        I: [("Hurling", "Shinty"), ("Pelota", "Jai Alai"),
            ("Biathlon", "Nordic Combined")],
    },
}


class PresetPick(NamedTuple):
    word: str
    category: str


class UndercoverPick(NamedTuple):
    secret_word: str
    imposter_word: str
    category: str


def _resolve_category(
    table: Dict[str, dict], category: Optional[str], rng: random.Random
) -> str:
    """Return the table key for ``category`` (case-insensitive) or a random one."""
    if not category or category.strip().lower() == RANDOM_CATEGORY.lower():
        return rng.choice(sorted(table))
    wanted = category.strip().lower()
    for name in table:
        if name.lower() == wanted:
            return name
    raise ValueError(f"Unknown preset category: {category!r}")


def list_categories() -> Set[str]:
    return set(PRESET_WORDS)


def list_undercover_categories() -> Set[str]:
    return set(UNDERCOVER_PAIRS)


def has_category(category: str) -> bool:
    wanted = (category or "").strip().lower()
    return any(name.lower() == wanted for name in PRESET_WORDS)


def pick_random(
    difficulty: Difficulty,
    category: Optional[str] = RANDOM_CATEGORY,
    rng: Optional[random.Random] = None,
) -> PresetPick:
    """Pick one classic preset word for ``difficulty`` and category."""
    rng = rng or _default_rng
    name = _resolve_category(PRESET_WORDS, category, rng)
    word = rng.choice(PRESET_WORDS[name][Difficulty(difficulty)])
    logger.debug("Preset pick from '%s' (%s)", name, difficulty)
    return PresetPick(word=word, category=name)


def pick_random_undercover(
    difficulty: Difficulty,
    category: Optional[str] = RANDOM_CATEGORY,
    rng: Optional[random.Random] = None,
) -> UndercoverPick:
    """Pick one (secret, decoy) preset pair for ``difficulty`` and category."""
    rng = rng or _default_rng
    name = _resolve_category(UNDERCOVER_PAIRS, category, rng)
    secret_word, imposter_word = rng.choice(
        UNDERCOVER_PAIRS[name][Difficulty(difficulty)]
    )
    logger.debug("Undercover preset pick from '%s' (%s)", name, difficulty)
    return UndercoverPick(secret_word, imposter_word, name)
