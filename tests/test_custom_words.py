import random
from collections import Counter

import pytest

from imposter.game.constants import MSG_CUSTOM_FIELDS_REQUIRED, GameMode, Phase
from imposter.game.custom_words import pick_custom_materials
from imposter.game.errors import PhaseError, ValidationError
from imposter.game.events import (
    BeginCustomInput,
    MaterialsReady,
    SelectMode,
    SubmitCustomWord,
    UpdateSetup,
)
from imposter.game.models import CustomWord, RoundMaterials, initial_session
from imposter.game.transitions import apply_event

SUBMISSIONS = [("Food", "Pizza"), ("Food", "Burger"), ("Food", "Taco")]


def _custom_input(player_count=3):
    session = apply_event(initial_session(), SelectMode(GameMode.CUSTOM))
    session = apply_event(session, UpdateSetup(player_count=player_count))
    return apply_event(session, BeginCustomInput())


def test_scenario_custom_round_starts_after_last_submission():
    session = _custom_input()

    for index, (category, word) in enumerate(SUBMISSIONS[:-1]):
        session = apply_event(session, SubmitCustomWord(category, word))
        assert session.phase == Phase.CUSTOM_INPUT
        assert session.custom_input_index == index + 1
        assert session.players == ()

    session = apply_event(session, SubmitCustomWord(*SUBMISSIONS[-1]))

    assert session.phase == Phase.PASS_DEVICE
    assert session.secret_word in {"Pizza", "Burger", "Taco"}
    assert session.category == "Food"
    assert session.imposter_word is None
    assert session.imposter_hint is None
    assert len(session.players) == 3
    assert [entry.player_id for entry in session.custom_words] == [1, 2, 3]


@pytest.mark.parametrize(
    "category, word", [("", "Pizza"), ("Food", ""), ("  ", "  ")]
)
def test_blank_fields_are_rejected(category, word):
    session = _custom_input()
    with pytest.raises(ValidationError, match=MSG_CUSTOM_FIELDS_REQUIRED):
        apply_event(session, SubmitCustomWord(category, word))


def test_submissions_are_trimmed():
    session = apply_event(_custom_input(), SubmitCustomWord(" Food ", " Pizza "))
    assert session.custom_words[0] == CustomWord(
        player_id=1, category="Food", word="Pizza"
    )


def test_every_submission_can_become_the_secret():
    rng = random.Random(2024)
    counts = Counter()
    for _ in range(300):
        session = _custom_input()
        for category, word in SUBMISSIONS:
            session = apply_event(session, SubmitCustomWord(category, word), rng)
        counts[session.secret_word] += 1
    assert set(counts) == {"Pizza", "Burger", "Taco"}


def test_pick_custom_materials_uses_any_entry(scripted_rng):
    entries = [
        CustomWord(player_id=1, category="Food", word="Pizza"),
        CustomWord(player_id=2, category="Places", word="Beach"),
    ]
    materials = pick_custom_materials(entries, scripted_rng(choices=[1]))
    assert materials == RoundMaterials(secret_word="Beach", category="Places")

    with pytest.raises(ValueError):
        pick_custom_materials([])


def test_custom_mode_never_takes_fetched_materials():
    session = apply_event(initial_session(), SelectMode(GameMode.CUSTOM))
    with pytest.raises(PhaseError):
        apply_event(
            session,
            MaterialsReady(RoundMaterials(secret_word="Lion", category="A")),
        )
