"""Tests for the open-session-files app and its open-file flow."""

import contextlib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, call, patch

import pytest
from conftest import assistant_message, tool_call
from open_session_files.launcher import CLEAR_SCREEN
from open_session_files.settings import EffectiveSettings
from open_session_files.tui import OpenSessionFilesApp
from open_session_files.tui.commands import OpenFileCommands
from open_session_files.tui.modals import FilePickerModal

_LAUNCH = "open_session_files.tui.actions.open_file.run_open_command"
_SYS = "open_session_files.tui.actions.open_file.sys"


class _FakeSession:
    """SessionSource with a fixed branch."""

    def __init__(self, entries: Sequence[Mapping[str, Any]]) -> None:
        self.entries = entries

    def get_branch(self) -> Sequence[Mapping[str, Any]]:
        return self.entries


def _edit_session() -> _FakeSession:
    return _FakeSession(
        [assistant_message(tool_call("edit", "foo.go"), tool_call("write", "bar.go"))]
    )


@pytest.fixture
def project(clean_env: Path, tmp_path: Path) -> Path:
    """A project directory containing foo.go and bar.go."""
    cwd = tmp_path / "proj"
    cwd.mkdir()
    (cwd / "foo.go").write_text("package foo\n")
    (cwd / "bar.go").write_text("package bar\n")
    return cwd


async def test_no_edited_files_warns(project: Path) -> None:
    """A session without edits shows a warning and no picker."""
    session = _FakeSession([assistant_message(tool_call("read", "foo.go"))])
    app = OpenSessionFilesApp(session=session, cwd=str(project))
    with patch.object(OpenSessionFilesApp, "notify") as mock_notify:
        async with app.run_test() as pilot:
            await pilot.pause()
            assert not isinstance(app.screen, FilePickerModal)

    mock_notify.assert_called_once_with(
        "No files edited by the agent in this session", severity="warning"
    )


async def test_no_existing_files_warns(project: Path) -> None:
    """Edited files that are gone from disk are not offered."""
    session = _FakeSession([assistant_message(tool_call("edit", "deleted.go"))])
    app = OpenSessionFilesApp(session=session, cwd=str(project))
    with patch.object(OpenSessionFilesApp, "notify") as mock_notify:
        async with app.run_test() as pilot:
            await pilot.pause()
            assert not isinstance(app.screen, FilePickerModal)

    mock_notify.assert_called_once_with(
        "No existing edited files to open", severity="warning"
    )


async def test_pick_and_launch_in_background(
    project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Typing 'bar' and pressing enter launches bar.go in the background."""
    monkeypatch.setenv("PI_OPEN_FILE_MODE", "background")
    monkeypatch.setenv("PI_OPEN_FILE_COMMAND", "code {file}")
    app = OpenSessionFilesApp(session=_edit_session(), cwd=str(project))
    with (
        patch(_LAUNCH) as mock_launch,
        patch.object(OpenSessionFilesApp, "notify") as mock_notify,
    ):
        async with app.run_test() as pilot:
            await pilot.pause()
            assert isinstance(app.screen, FilePickerModal)
            await pilot.press("b", "a", "r", "enter")
            await pilot.pause()

    mock_launch.assert_called_once_with(
        "bar.go",
        str(project),
        EffectiveSettings(
            open_command="code {file}", open_mode="background", shortcut="alt+o"
        ),
    )
    mock_notify.assert_called_once_with("Launched open command in background")


async def test_pick_and_launch_in_foreground_suspends(project: Path) -> None:
    """Foreground launches clear the screen inside the suspended terminal."""
    app = OpenSessionFilesApp(session=_edit_session(), cwd=str(project))
    suspend = MagicMock(return_value=contextlib.nullcontext())
    with (
        patch(_LAUNCH) as mock_launch,
        patch(_SYS) as mock_sys,
        patch.object(app, "suspend", suspend),
        patch.object(app, "refresh", wraps=app.refresh) as mock_refresh,
    ):
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()

    suspend.assert_called_once_with()
    mock_sys.stdout.write.assert_called_once_with(CLEAR_SCREEN)
    mock_launch.assert_called_once()
    assert mock_launch.call_args.args[0] == "foo.go"
    assert mock_launch.call_args.args[2].open_mode == "foreground"
    assert call(repaint=True, layout=True) in mock_refresh.call_args_list


@pytest.mark.parametrize("mode", ["background", "foreground"])
async def test_launch_failure_is_reported_not_raised(
    project: Path, monkeypatch: pytest.MonkeyPatch, mode: str
) -> None:
    """A shell that cannot be started shows an error and the app keeps running."""
    monkeypatch.setenv("PI_OPEN_FILE_MODE", mode)
    monkeypatch.setenv("SHELL", "/nonexistent/shell")
    app = OpenSessionFilesApp(session=_edit_session(), cwd=str(project))
    suspend = MagicMock(return_value=contextlib.nullcontext())
    with (
        patch(_SYS),
        patch.object(app, "suspend", suspend),
        patch.object(OpenSessionFilesApp, "notify") as mock_notify,
    ):
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()
            assert app.is_running

    mock_notify.assert_called_once()
    assert mock_notify.call_args.args[0].startswith("Could not run open command:")
    assert mock_notify.call_args.kwargs == {"severity": "error"}


async def test_ctrl_p_and_ctrl_n_move_the_picker_highlight(project: Path) -> None:
    """ctrl+n/ctrl+p navigate the picker instead of opening the command palette."""
    app = OpenSessionFilesApp(session=_edit_session(), cwd=str(project))
    async with app.run_test() as pilot:
        await pilot.pause()
        modal = app.screen
        assert isinstance(modal, FilePickerModal)

        await pilot.press("ctrl+n")
        assert modal.state.highlighted == 1
        await pilot.press("ctrl+p")
        await pilot.pause()
        assert app.screen is modal
        assert modal.state.highlighted == 0


async def test_stale_selection_warns_without_launching(project: Path) -> None:
    """A file deleted while the picker is open is not launched."""
    app = OpenSessionFilesApp(session=_edit_session(), cwd=str(project))
    with (
        patch(_LAUNCH) as mock_launch,
        patch.object(OpenSessionFilesApp, "notify") as mock_notify,
    ):
        async with app.run_test() as pilot:
            await pilot.pause()
            (project / "foo.go").unlink()
            await pilot.press("enter")
            await pilot.pause()

    mock_launch.assert_not_called()
    mock_notify.assert_called_once_with(
        "File no longer exists: foo.go", severity="warning"
    )


async def test_cancel_does_not_launch(project: Path) -> None:
    """Escape closes the picker without launching anything."""
    app = OpenSessionFilesApp(session=_edit_session(), cwd=str(project))
    with patch(_LAUNCH) as mock_launch:
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()
            assert not isinstance(app.screen, FilePickerModal)

    mock_launch.assert_not_called()


async def test_shortcut_opens_picker(project: Path) -> None:
    """The configured shortcut opens the picker when auto-open is off."""
    app = OpenSessionFilesApp(
        session=_edit_session(), cwd=str(project), shortcut="ctrl+o", auto_open=False
    )
    async with app.run_test() as pilot:
        await pilot.pause()
        assert not isinstance(app.screen, FilePickerModal)

        await pilot.press("ctrl+o")
        await pilot.pause()
        assert isinstance(app.screen, FilePickerModal)

        # A second press while open does not stack another picker
        await pilot.press("ctrl+o")
        await pilot.pause()
        assert len(app.screen_stack) == 2


def test_open_file_command_registered() -> None:
    """The open-file command is available from the command palette."""
    assert OpenFileCommands in OpenSessionFilesApp.COMMANDS
