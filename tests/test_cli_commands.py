import logging
from dataclasses import dataclass, field
from typing import List

from isles.presentation.cli import app
from isles.presentation.cli.app import dispatch_command
from isles.services.controllers import CommandResult


@dataclass
class _RecordingController:
    calls: List[tuple] = field(default_factory=list)

    def __getattr__(self, name: str):
        def _record(state, *args):
            self.calls.append((name, *args))
            return CommandResult(accepted=True)

        return _record


def _dispatch(raw: str) -> tuple:
    controller = _RecordingController()
    result = dispatch_command(controller, state=None, raw=raw)
    assert result is not None
    return controller.calls[-1]


def test_movement_keys() -> None:
    assert _dispatch("w") == ("move", "north")
    assert _dispatch("a") == ("move", "west")
    assert _dispatch("s") == ("move", "south")
    assert _dispatch("D") == ("move", "east")


def test_action_keys() -> None:
    assert _dispatch("") == ("confirm",)
    assert _dispatch("1") == ("attack",)
    assert _dispatch("2") == ("run",)
    assert _dispatch("r") == ("restart",)
    assert _dispatch("`") == ("toggle_debug",)


def test_debug_commands() -> None:
    assert _dispatch(":hp 7") == ("debug_set_hp", 7)
    assert _dispatch(":pos 3 4") == ("debug_set_position", 3, 4)
    assert _dispatch(":enc 2.5") == ("debug_set_encounter_multiplier", 2.5)
    assert _dispatch(":win") == ("debug_force_outcome", "won")
    assert _dispatch(":flee") == ("debug_force_outcome", "fled")
    assert _dispatch(":fight") == ("debug_start_combat",)
    assert _dispatch(":mode combat") == ("debug_set_mode", "combat")


def test_unrecognised_input_returns_none() -> None:
    controller = _RecordingController()
    for raw in ("x", ":hp lots", ":pos 1", ":", ":teleport"):
        assert dispatch_command(controller, None, raw) is None
    assert controller.calls == []


def test_configure_logging_reads_env(monkeypatch) -> None:
    captured = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

    monkeypatch.delenv("ISLES_DEBUG", raising=False)
    monkeypatch.setenv("ISLES_LOG_LEVEL", "info")
    app.configure_logging()
    assert captured["level"] == logging.INFO

    monkeypatch.setenv("ISLES_DEBUG", "1")
    app.configure_logging()
    assert captured["level"] == logging.DEBUG

    monkeypatch.delenv("ISLES_DEBUG")
    monkeypatch.setenv("ISLES_LOG_LEVEL", "nonsense")
    app.configure_logging()
    assert captured["level"] == logging.WARNING


def test_prompt_reflects_available_combat_actions() -> None:
    controller = app._build_session_controller()
    state = controller.new_session(4)
    assert app._prompt_for(controller, state) == "[enter] continue: "

    controller.debug_start_combat(state)
    assert app._prompt_for(controller, state) == "1. Attack  2. Run > "

    controller.run(state)
    assert app._prompt_for(controller, state) == "[enter] continue: "


def test_battle_screen_uses_combat_view(capsys) -> None:
    controller = app._build_session_controller()
    state = controller.new_session(4)
    controller.debug_start_combat(state)

    app._render_screen(controller, state)

    out = capsys.readouterr().out
    assert "=== Battle - Turn 0 ===" in out
    assert f"{state.combat.enemy.display_name}  HP" in out
