"""Tests for anonymous identity, local preferences and share links."""

import pytest

from app.core.preferences import USER_NAME_KEY, LocalPreferences
from app.features.auth.identity import IdentityGate, IdentityNotReadyError
from app.features.auth.service import AuthService
from app.features.share.service import build_share_link, build_share_message


def test_anonymous_token_resolves_to_principal() -> None:
    session = AuthService.sign_in_anonymously()
    principal = AuthService.principal_from_token(session.access_token)
    assert principal.principal_id == session.principal_id


def test_garbage_token_rejected() -> None:
    assert AuthService.principal_from_token("garbage") is None


@pytest.mark.asyncio
async def test_gate_signs_in_once() -> None:
    calls = []

    async def sign_in():
        calls.append(1)
        return AuthService.sign_in_anonymously()

    gate = IdentityGate(sign_in=sign_in)
    with pytest.raises(IdentityNotReadyError):
        gate.require()

    first = await gate.ensure()
    second = await gate.ensure()

    assert first == second == gate.require()
    assert gate.ready
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_gate_failure_leaves_not_ready() -> None:
    def sign_in():
        raise RuntimeError("no network")

    gate = IdentityGate(sign_in=sign_in)
    with pytest.raises(IdentityNotReadyError):
        await gate.ensure()
    assert not gate.ready


def test_preferences_round_trip(tmp_path) -> None:
    prefs = LocalPreferences(str(tmp_path / "nested" / "prefs.json"))
    assert prefs.get_user_name() is None

    assert not prefs.save_user_name("   ")
    assert prefs.save_user_name(" Ana ")

    assert LocalPreferences(str(tmp_path / "nested" / "prefs.json")).get(USER_NAME_KEY) == "Ana"


def test_corrupt_preferences_file_ignored(tmp_path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    assert LocalPreferences(str(path)).get_user_name() is None


def test_share_link_encodes_message() -> None:
    url = "https://example.org/calendario?x=1"
    link = build_share_link(url)

    assert link.startswith("https://wa.me/?text=%C2%A1Hola!%20")
    assert "https%3A%2F%2Fexample.org%2Fcalendario%3Fx%3D1" in link
    assert url in build_share_message(url)
