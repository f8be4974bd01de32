import time

from commons import generate_session_id
from configs.config import get_config

cfg = get_config()

ADMIN_HEADERS = {"X-Admin-Key": cfg.ADMIN_API_KEY}


def _create(client):
    response = client.post("/api/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]


def _post(client, session_id, command, **kwargs):
    return client.post(f"/api/sessions/{session_id}/{command}", **kwargs)


def _wait_for_reveal(client, session_id):
    for _ in range(200):
        game = client.get(f"/api/sessions/{session_id}").json()["game"]
        if game["reveal"]["reveal_stage"] == "REVEALED":
            return game
        time.sleep(0.01)
    raise AssertionError("card was never revealed")


def _start_classic_round(client, session_id):
    assert _post(
        client, session_id, "mode", json={"mode": "AI_RANDOM"}
    ).status_code == 200
    setup = _post(
        client,
        session_id,
        "setup",
        json={
            "category": "Animals",
            "player_count": 3,
            "timer_duration": 0,
            "imposter_hint_enabled": False,
        },
    )
    assert setup.status_code == 200
    return _post(client, session_id, "start")


def test_full_classic_round_over_http(client):
    session_id = _create(client)

    start = _start_classic_round(client, session_id)
    assert start.status_code == 200
    game = start.json()["game"]
    assert game["phase"] == "PASS_DEVICE"
    assert game["pass_device"]["player_id"] == 1
    assert "Lion" not in start.text

    cards = []
    for player_id in (1, 2, 3):
        assert _post(client, session_id, "confirm-player").status_code == 200
        assert _post(client, session_id, "reveal").status_code == 200
        game = _wait_for_reveal(client, session_id)
        card = game["reveal"]["card"]
        assert card["player_id"] == player_id
        cards.append(card)
        _post(client, session_id, "advance")

    kinds = sorted(card["kind"] for card in cards)
    assert kinds == ["imposter", "word", "word"]

    game = client.get(f"/api/sessions/{session_id}").json()["game"]
    assert game["phase"] == "GAME_ACTIVE"
    assert game["discussion"]["player_ids"] == [1, 2, 3]

    hint = _post(client, session_id, "hints")
    assert hint.status_code == 200
    assert hint.json()["game"]["discussion"]["hints"] == ["Question 1"]

    _post(client, session_id, "forgot/open")
    _post(client, session_id, "forgot/select", json={"player_id": 2})
    confirmed = _post(client, session_id, "forgot/confirm")
    modal = confirmed.json()["game"]["discussion"]["forgot_modal"]
    assert modal["step"] == "REVEAL"
    assert modal["card"] == cards[1]
    closed = _post(client, session_id, "forgot/close")
    assert closed.json()["game"]["discussion"]["forgot_modal"]["card"] is None

    results = _post(client, session_id, "results").json()["game"]
    assert results["phase"] == "GAME_OVER"
    assert results["results"]["secret_word"] == "Lion"
    imposter_card = next(c for c in cards if c["kind"] == "imposter")
    assert results["results"]["imposter_id"] == imposter_card["player_id"]

    reset = _post(client, session_id, "reset")
    assert reset.json()["game"]["phase"] == "MODE_SELECTION"


def test_custom_round_over_http(client):
    session_id = _create(client)
    _post(client, session_id, "mode", json={"mode": "CUSTOM"})
    _post(client, session_id, "setup", json={"player_count": 3})
    start = _post(client, session_id, "start")
    assert start.json()["game"]["custom_input"]["player_id"] == 1

    blank = _post(
        client, session_id, "custom-words", json={"category": "Food"}
    )
    assert blank.status_code == 400
    assert blank.json()["detail"] == "Please fill in both fields"

    for word in ("Pizza", "Burger", "Taco"):
        response = _post(
            client,
            session_id,
            "custom-words",
            json={"category": "Food", "word": word},
        )
        assert response.status_code == 200
    assert response.json()["game"]["phase"] == "PASS_DEVICE"


def test_validation_and_phase_errors_return_400(client):
    session_id = _create(client)
    _post(client, session_id, "mode", json={"mode": "AI_RANDOM"})

    start = _post(client, session_id, "start")
    assert start.status_code == 400
    assert start.json()["detail"] == "Please enter a category"

    again = _post(client, session_id, "mode", json={"mode": "PRESET"})
    assert again.status_code == 400

    too_few = _post(client, session_id, "setup", json={"player_count": 2})
    assert too_few.status_code == 400

    bad_mode = _post(client, session_id, "mode", json={"mode": "CHESS"})
    assert bad_mode.status_code == 422


def test_unknown_preset_category_is_retryable(client):
    session_id = _create(client)
    _post(client, session_id, "mode", json={"mode": "PRESET"})
    _post(client, session_id, "setup", json={"category": "Spaceships"})

    failed = _post(client, session_id, "start")
    assert failed.status_code == 502
    assert failed.json()["detail"] == "Failed to start game."

    game = client.get(f"/api/sessions/{session_id}").json()["game"]
    assert game["phase"] == "SETUP"
    assert game["error"] == "Failed to start game."


def test_quit_requires_confirmation(client):
    session_id = _create(client)
    assert _start_classic_round(client, session_id).status_code == 200

    prompt = _post(client, session_id, "quit", json={})
    assert prompt.json()["confirm_required"] is True
    assert prompt.json()["game"]["phase"] == "PASS_DEVICE"
    assert _post(client, session_id, "reset").status_code == 400

    done = _post(client, session_id, "quit", json={"confirmed": True})
    assert done.json()["confirm_required"] is False
    assert done.json()["game"]["phase"] == "MODE_SELECTION"


def test_session_lookup_errors(client):
    assert client.get("/api/sessions/bad-id").status_code == 400
    assert client.get("/api/sessions/ZZZZZ").status_code == 404
    assert _post(client, "ZZZZZ", "advance").status_code == 404


def test_session_codes_are_case_insensitive(client):
    session_id = _create(client)
    response = client.get(f"/api/sessions/{session_id.lower()}")
    assert response.status_code == 200
    assert response.json()["game"]["session_id"] == session_id


def test_preset_categories(client):
    classic = client.get("/api/presets/categories").json()["categories"]
    undercover = client.get(
        "/api/presets/categories", params={"undercover": True}
    ).json()["categories"]
    assert "Professions" in classic
    assert "Music" in undercover
    assert classic == sorted(classic)


def test_responses_are_never_cached(client):
    response = client.post("/api/sessions")
    assert response.headers["Cache-Control"] == "no-store"
    assert response.headers["X-Request-ID"]


def test_admin_endpoints_require_key(client):
    session_id = _create(client)

    denied = client.delete(f"/api/sessions/{session_id}")
    assert denied.status_code == 403

    cleanup = client.post("/api/sessions/cleanup", headers=ADMIN_HEADERS)
    assert cleanup.status_code == 200
    assert cleanup.json()["removed"] == 0

    deleted = client.delete(
        f"/api/sessions/{session_id}", headers=ADMIN_HEADERS
    )
    assert deleted.status_code == 200
    assert client.get(f"/api/sessions/{session_id}").status_code == 404
    assert client.delete(
        f"/api/sessions/{session_id}", headers=ADMIN_HEADERS
    ).status_code == 404


def test_generated_codes_skip_lookalike_characters():
    codes = {generate_session_id() for _ in range(200)}
    assert all(len(code) == 5 for code in codes)
    assert not set("".join(codes)) & set("0O1IL")
