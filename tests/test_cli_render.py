from isles.domain.terrain import Grid, TileKind
from isles.presentation.cli import render
from isles.presentation.cli.render import combat_line, format_events, grid_lines, render_lines, set_text_display_mode
from isles.services.controllers import CombatView
from isles.services.controllers.session_controller import (
    CombatRoundEvent,
    DebugToggledEvent,
    PlayerMovedEvent,
    SessionCompletedEvent,
    SessionRestartedEvent,
)


def _make_grid() -> Grid:
    grid = Grid.filled(4, 3)
    grid.set(1, 1, TileKind.LAND)
    grid.set(2, 1, TileKind.FOREST)
    grid.set(1, 2, TileKind.MOUNTAIN)
    grid.set(2, 2, TileKind.GOAL)
    return grid


def test_grid_lines_draw_tiles_and_player() -> None:
    assert grid_lines(_make_grid()) == ["~~~~", "~.T~", "~^G~"]
    assert grid_lines(_make_grid(), (1, 1)) == ["~~~~", "~@T~", "~^G~"]


def test_format_events_collects_lines() -> None:
    events = [
        PlayerMovedEvent(from_position=(1, 1), to_position=(2, 1), tile=TileKind.FOREST),
        CombatRoundEvent(outcome="fled", lines=["You ran away!"], player_hp=25, enemy_hp=12),
        SessionCompletedEvent(xp=20, gold=15),
    ]
    lines = format_events(events)

    assert lines[0] == "You ran away!"
    assert "Final tally: 20 EXP and 15 Gold." in lines


def test_defeat_restart_has_its_own_message() -> None:
    defeat = format_events([SessionRestartedEvent(reason="defeat")])
    manual = format_events([SessionRestartedEvent(reason="manual")])
    assert defeat != manual
    assert format_events([DebugToggledEvent(visible=True)]) == ["Debug panel shown."]


def test_debug_enabled_requires_exact_flag(monkeypatch) -> None:
    monkeypatch.setenv("ISLES_DEBUG", "1")
    assert render.debug_enabled() is True
    monkeypatch.setenv("ISLES_DEBUG", "yes")
    assert render.debug_enabled() is False


def test_step_mode_pauses_between_lines(capsys) -> None:
    pauses = []
    set_text_display_mode("step")
    try:
        render_lines(["a", "b", "c"], pause=pauses.append)
    finally:
        set_text_display_mode("instant")

    assert capsys.readouterr().out == "a\nb\nc\n"
    assert len(pauses) == 2


def test_instant_mode_never_pauses(capsys) -> None:
    pauses = []
    set_text_display_mode("bogus")
    render_lines(["a", "b"], pause=pauses.append)

    assert render.get_text_display_mode() == "instant"
    assert pauses == []
    assert capsys.readouterr().out == "a\nb\n"


def _make_view(enemy_hp: int) -> CombatView:
    return CombatView(
        enemy_name="Reef Crab",
        enemy_hp=enemy_hp,
        enemy_max_hp=18,
        player_hp=25,
        player_max_hp=25,
        turn=2,
        phase="in_progress" if enemy_hp else "won",
        awaiting_acknowledgement=enemy_hp == 0,
    )


def test_combat_line_shows_enemy_health() -> None:
    assert combat_line(_make_view(9)) == "Reef Crab  HP 9/18"
    assert combat_line(_make_view(0)) == "Reef Crab  HP DOWN"
    assert combat_line(_make_view(9), debug=True) == "Reef Crab  HP 9/18  [phase=in_progress]"
