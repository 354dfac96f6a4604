import pytest

from sentinelfs.cli import Config, parse_arguments, print_usage, print_version


def test_required_options_and_defaults():
    config = parse_arguments(["--session", "ABC", "--path", "/data/sync"])
    assert config == Config(session_code="ABC", sync_path="/data/sync")
    assert config.port == 8080
    assert config.discovery_interval == 5000
    assert config.remesh_threshold == 100
    assert config.verbose is False
    assert config.daemon_mode is False


def test_all_options():
    config = parse_arguments(
        [
            "--session", "S1",
            "--path", "dir",
            "--port", "9001",
            "--verbose",
            "--daemon",
            "--config", "settings.conf",
        ]
    )
    assert config.port == 9001
    assert config.verbose is True
    assert config.daemon_mode is True
    assert config.config_file == "settings.conf"


def test_later_option_overrides_earlier():
    config = parse_arguments(["--session", "one", "--session", "two", "--path", "p"])
    assert config.session_code == "two"


def test_help_exits_zero_with_usage(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--help"])
    assert exc.value.code == 0
    assert "Usage: sentinelfs-neo [OPTIONS]" in capsys.readouterr().out


def test_version_exits_zero(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out == "SentinelFS-Neo v1.0.0\n"


def test_unknown_option_exits_one(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--session", "S", "--path", "p", "--bogus"])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "Unknown option: --bogus" in captured.err
    assert "Usage: sentinelfs-neo [OPTIONS]" in captured.out


def test_option_missing_its_value_is_unknown(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--session", "S", "--path", "p", "--port"])
    assert exc.value.code == 1
    assert "Unknown option: --port" in capsys.readouterr().err


def test_gui_flag_is_not_parsed_here(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--gui"])
    assert exc.value.code == 1
    assert "Unknown option: --gui" in capsys.readouterr().err


def test_missing_session_exits_one(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--path", "p"])
    assert exc.value.code == 1
    assert "Error: --session is required" in capsys.readouterr().err


def test_missing_path_exits_one(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--session", "S"])
    assert exc.value.code == 1
    assert "Error: --path is required" in capsys.readouterr().err


def test_invalid_port_exits_one(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(["--session", "S", "--path", "p", "--port", "abc"])
    assert exc.value.code == 1
    assert "abc" in capsys.readouterr().err


def test_print_version(capsys):
    print_version()
    assert capsys.readouterr().out == "SentinelFS-Neo v1.0.0\n"


def test_print_usage_lists_options(capsys):
    print_usage()
    out = capsys.readouterr().out
    for option in ("--session", "--path", "--port", "--verbose", "--daemon", "--config"):
        assert option in out