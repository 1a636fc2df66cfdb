import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from terminal_input import cli
from terminal_input.cli import main

real_setup_logging = cli.setup_logging


@pytest.fixture(autouse=True)
def no_logging_setup():
    # main() reconfigures the root logger; keep pytest's handlers in place.
    with patch("terminal_input.cli.setup_logging") as mock_setup:
        yield mock_setup


@patch("terminal_input.cli.prompt_yes_no", new_callable=AsyncMock, return_value=True)
def test_yes_no_prints_yes_and_exits_zero(mock_prompt, capsys):
    assert main(["yes-no", "Continue?"]) == cli.EXIT_YES
    assert capsys.readouterr().out == "yes\n"
    mock_prompt.assert_awaited_once_with("Continue?", default_value=None)


@patch("terminal_input.cli.prompt_yes_no", new_callable=AsyncMock, return_value=False)
def test_yes_no_prints_no_and_exits_one(mock_prompt, capsys):
    assert main(["yes-no", "Delete?", "--default", "no"]) == cli.EXIT_NO
    assert capsys.readouterr().out == "no\n"
    mock_prompt.assert_awaited_once_with("Delete?", default_value=False)


@pytest.mark.parametrize("value, expected", [("yes", True), ("Y", True), ("true", True), ("n", False), ("FALSE", False)])
@patch("terminal_input.cli.prompt_yes_no", new_callable=AsyncMock, return_value=True)
def test_yes_no_default_values(mock_prompt, value, expected):
    main(["yes-no", "Continue?", "--default", value])
    assert mock_prompt.await_args.kwargs["default_value"] is expected


def test_yes_no_rejects_bad_default(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["yes-no", "Continue?", "--default", "maybe"])
    assert exc_info.value.code == 2
    assert "maybe" in capsys.readouterr().err


@patch("terminal_input.cli.prompt_line", new_callable=AsyncMock, return_value="  my project ")
def test_line_prints_answer(mock_prompt, capsys):
    assert main(["line", "Name?"]) == 0
    assert capsys.readouterr().out == "  my project \n"
    mock_prompt.assert_awaited_once_with("Name?")


@patch("terminal_input.cli.prompt_password_line", new_callable=AsyncMock, return_value="s3cret")
def test_password_uses_mask(mock_prompt, capsys):
    assert main(["password", "Token?", "--mask", ""]) == 0
    assert capsys.readouterr().out == "s3cret\n"
    mock_prompt.assert_awaited_once_with("Token?", mask_character="")


@patch("terminal_input.cli.prompt_password_line", new_callable=AsyncMock, return_value="x")
def test_password_default_mask(mock_prompt):
    main(["password", "Token?"])
    mock_prompt.assert_awaited_once_with("Token?", mask_character="*")


def test_missing_command_is_an_error():
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2


@patch("terminal_input.cli.prompt_yes_no", new_callable=AsyncMock, side_effect=RuntimeError("Interactive prompts require standard input to be a terminal."))
def test_non_terminal_reports_error(mock_prompt, capsys):
    assert main(["yes-no", "Continue?"]) == cli.EXIT_ERROR
    assert "terminal" in capsys.readouterr().err


@patch("terminal_input.cli.prompt_line", new_callable=AsyncMock, side_effect=EOFError)
def test_eof_exit_code(mock_prompt):
    assert main(["line", "Name?"]) == cli.EXIT_EOF


@patch("terminal_input.cli.prompt_yes_no", new_callable=AsyncMock, side_effect=EOFError)
def test_closed_input_is_not_a_no_answer(mock_prompt):
    status = main(["yes-no", "Continue?"])
    assert status == cli.EXIT_EOF == 3
    assert status != cli.EXIT_NO


def test_interrupt_exit_code():
    with patch("terminal_input.cli.run_command", new_callable=MagicMock), patch(
        "terminal_input.cli.asyncio.run", side_effect=KeyboardInterrupt
    ):
        assert main(["line", "Name?"]) == cli.EXIT_INTERRUPTED


def test_log_file_defaults_from_environment(monkeypatch, no_logging_setup):
    monkeypatch.setenv(cli.LOG_FILE_ENV_VAR, "/tmp/prompts.log")
    args = cli.build_parser().parse_args(["line", "Name?"])
    assert args.log_file == "/tmp/prompts.log"
    assert args.log_level == "INFO"


@patch("terminal_input.cli.prompt_line", new_callable=AsyncMock, return_value="x")
def test_main_configures_logging(mock_prompt, no_logging_setup):
    main(["--log-file", "prompts.log", "--log-level", "DEBUG", "line", "Name?"])
    no_logging_setup.assert_called_once_with("prompts.log", "DEBUG")


def test_setup_logging_writes_to_file_only(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    log_file = tmp_path / "prompts.log"
    try:
        real_setup_logging(str(log_file), "DEBUG")
        assert [type(h) for h in root.handlers] == [logging.FileHandler]
        assert root.level == logging.DEBUG
        logging.getLogger("terminal_input.test").debug("hello from the test")
        root.handlers[0].flush()
        content = log_file.read_text(encoding="utf-8")
        assert "DEBUG [terminal_input.test] hello from the test" in content

        real_setup_logging(None)
        assert [type(h) for h in root.handlers] == [logging.NullHandler]
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
