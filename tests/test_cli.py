import pytest
from click.testing import CliRunner

from scripts.cli import build_app


@pytest.fixture
def app():
    return build_app()


def test_commands_are_exposed(app):
    names = set(app.commands)
    assert {"roll", "master", "combat", "aim", "evade", "armor", "tension"} <= names
    assert {"history", "preset", "reset", "help", "shell"} <= names
    assert set(app.commands["preset"].commands) == {"show", "save"}


def test_roll_prints_summary(app, settings, session_factory):
    session = session_factory(5, 3, 6)
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["roll", "--base", "d8", "--bonus", "d4", "--proficient"],
        obj={"settings": settings, "session": session},
    )
    assert result.exit_code == 0, result.output
    assert "= **42** (Hero Result)" in result.output


def test_mode_choice_is_case_insensitive(app, settings, session_factory):
    session = session_factory(2, 11)
    result = CliRunner().invoke(
        app, ["roll", "--mode", "advantage"], obj={"settings": settings, "session": session}
    )
    assert result.exit_code == 0, result.output
    assert "d20:11 (was 2)" in result.output


def test_invalid_choice_is_rejected(app, settings, session_factory):
    result = CliRunner().invoke(
        app, ["tension", "--target", "nobody"], obj={"settings": settings, "session": session_factory()}
    )
    assert result.exit_code != 0


def test_preset_save_subcommand(app, settings, session_factory):
    result = CliRunner().invoke(
        app,
        ["preset", "save", "--stat", "MEN", "--base", "d6", "--bonus", "d10"],
        obj={"settings": settings, "session": session_factory()},
    )
    assert result.exit_code == 0, result.output
    assert "Preset saved for **MEN**: d6 + d10" in result.output


def test_help_is_ephemeral(app, settings):
    result = CliRunner().invoke(app, ["help"], obj={"settings": settings})
    assert result.exit_code == 0
    assert result.output.startswith("(ephemeral) Swordsaga — Quick Start")


def test_shell_keeps_one_session(app, settings):
    result = CliRunner().invoke(
        app,
        ["shell"],
        input="/roll --label opener\n\nhistory\nquit\n",
        obj={"settings": settings},
    )
    assert result.exit_code == 0, result.output
    assert "📜 Recent rolls:" in result.output
    assert "opener: **" in result.output


def test_shell_survives_bad_input(app, settings):
    result = CliRunner().invoke(
        app,
        ["shell"],
        input='/roll --label kept\nhistory --limit 99\nroll --label "oops\nhistory\nquit\n',
        obj={"settings": settings},
    )
    assert result.exit_code == 0, result.output
    assert "Invalid options: limit" in result.output
    assert "Could not parse input" in result.output
    # the session outlived both errors
    assert "kept: **" in result.output


def test_one_shot_invalid_options_is_a_usage_error(app, settings, session_factory):
    result = CliRunner().invoke(
        app, ["history", "--limit", "99"], obj={"settings": settings, "session": session_factory()}
    )
    assert result.exit_code == 2
    assert "Invalid options: limit" in result.output
