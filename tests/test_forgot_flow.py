import pytest

from imposter.game import forgot
from imposter.game.constants import ForgotStep, GameMode, Phase
from imposter.game.errors import PhaseError, ValidationError
from imposter.game.events import (
    Advance,
    ConfirmPlayer,
    MaterialsReady,
    RevealComplete,
    SelectMode,
    TapReveal,
    Tick,
    UpdateSetup,
)
from imposter.game.models import ForgotModal, RoundMaterials, initial_session
from imposter.game.reveal import build_role_card
from imposter.game.transitions import apply_event


@pytest.fixture
def discussion(scripted_rng):
    """A 3-player classic round in discussion; player 2 is the imposter."""
    session = apply_event(initial_session(), SelectMode(GameMode.AI_RANDOM))
    session = apply_event(
        session, UpdateSetup(category="Animals", player_count=3)
    )
    session = apply_event(
        session,
        MaterialsReady(
            RoundMaterials(
                secret_word="Lion", category="Animals", imposter_hint="Big cat"
            )
        ),
        scripted_rng(ranges=[1, 0]),
    )
    first_cards = {}
    while session.phase != Phase.GAME_ACTIVE:
        session = apply_event(session, ConfirmPlayer())
        session = apply_event(session, TapReveal())
        session = apply_event(
            session, RevealComplete(session.reveal_generation)
        )
        player_id = session.current_player.id
        first_cards[player_id] = build_role_card(session, player_id)
        session = apply_event(session, Advance())
    return session, first_cards


def test_scenario_forgot_word_reveal_matches_first_reveal(discussion):
    session, first_cards = discussion

    modal = forgot.open_modal(session, forgot.CLOSED)
    assert modal.is_open and modal.step == ForgotStep.SELECT
    assert forgot.modal_card(session, modal) is None

    modal = forgot.select_player(session, modal, 2)
    assert modal.step == ForgotStep.CONFIRM
    assert forgot.modal_card(session, modal) is None

    modal = forgot.confirm_identity(session, modal)
    assert modal.step == ForgotStep.REVEAL
    assert forgot.modal_card(session, modal) == first_cards[2]

    closed = forgot.close_modal()
    assert closed == ForgotModal(
        is_open=False, step=ForgotStep.SELECT, player_id=None
    )


def test_forgot_flow_leaves_session_untouched(discussion):
    session, _ = discussion
    before = session.model_dump()
    modal = forgot.open_modal(session, forgot.CLOSED)
    modal = forgot.select_player(session, modal, 1)
    forgot.confirm_identity(session, modal)
    assert session.model_dump() == before


def test_timer_keeps_running_while_modal_is_open(discussion):
    session, _ = discussion
    modal = forgot.open_modal(session, forgot.CLOSED)
    ticked = apply_event(session, Tick())
    assert ticked.time_left == session.time_left - 1
    assert forgot.select_player(ticked, modal, 3).player_id == 3


def test_back_returns_to_selection(discussion):
    session, _ = discussion
    modal = forgot.select_player(
        session, forgot.open_modal(session, forgot.CLOSED), 3
    )
    modal = forgot.back_to_select(session, modal)
    assert modal == ForgotModal(is_open=True)


def test_steps_must_follow_order(discussion):
    session, _ = discussion
    with pytest.raises(PhaseError):
        forgot.select_player(session, forgot.CLOSED, 1)

    modal = forgot.open_modal(session, forgot.CLOSED)
    with pytest.raises(PhaseError):
        forgot.confirm_identity(session, modal)
    with pytest.raises(ValidationError):
        forgot.select_player(session, modal, 7)


def test_forgot_only_during_discussion():
    with pytest.raises(PhaseError):
        forgot.open_modal(initial_session(), forgot.CLOSED)
