import random

import pytest

from imposter.game import presets
from imposter.game.constants import Difficulty


def test_category_listings():
    assert {"Animals", "Food", "Places"} <= presets.list_categories()
    assert {"Food", "Music"} <= presets.list_undercover_categories()
    assert presets.has_category("animals")
    assert not presets.has_category("Spaceships")


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_every_table_is_filled(difficulty):
    for words in presets.PRESET_WORDS.values():
        assert words[difficulty]
    for pairs in presets.UNDERCOVER_PAIRS.values():
        assert pairs[difficulty]
        for secret_word, imposter_word in pairs[difficulty]:
            assert secret_word.lower() != imposter_word.lower()


def test_pick_random_respects_category_and_difficulty():
    rng = random.Random(5)
    for _ in range(20):
        pick = presets.pick_random(Difficulty.HARD, "food", rng)
        assert pick.category == "Food"
        assert pick.word in presets.PRESET_WORDS["Food"][Difficulty.HARD]


def test_random_category_draws_from_all():
    rng = random.Random(11)
    seen = {
        presets.pick_random(Difficulty.EASY, "Random", rng).category
        for _ in range(200)
    }
    assert seen == presets.list_categories()
    assert presets.pick_random(Difficulty.EASY, "", rng).category in seen


def test_pick_random_undercover():
    pick = presets.pick_random_undercover(
        Difficulty.MEDIUM, "Music", random.Random(3)
    )
    assert pick.category == "Music"
    assert (pick.secret_word, pick.imposter_word) in (
        presets.UNDERCOVER_PAIRS["Music"][Difficulty.MEDIUM]
    )


def test_unknown_category_raises():
    with pytest.raises(ValueError):
        presets.pick_random(Difficulty.EASY, "Spaceships")
    with pytest.raises(ValueError):
        presets.pick_random_undercover(Difficulty.EASY, "Professions")
