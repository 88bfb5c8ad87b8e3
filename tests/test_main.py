"""Tests for the demo host program and the logging setup."""

import io

import pytest
from loguru import logger

from cliopts import ErrorCode, parse_options
from cliopts.__main__ import main
from cliopts.log import reset_logger, setup_logger

from conftest import Recorder


class TestDemoProgram:
    def test_echo_words(self, capsys):
        assert main(["cliopts", "hello", "world"]) == 0
        assert capsys.readouterr().out == "hello world\n"

    def test_verbose_cluster_and_double_dash(self, capsys):
        assert main(["cliopts", "-vv", "--", "-x", "y"]) == 0
        assert capsys.readouterr().out == "2 word(s): -x y\n"

    def test_output_file(self, tmp_path, capsys):
        target = tmp_path / "out.txt"
        assert main(["cliopts", "-o", str(target), "a", "b"]) == 0
        assert target.read_text() == "a b\n"
        assert capsys.readouterr().out == ""

    def test_output_inline_value(self, tmp_path):
        target = tmp_path / "out.txt"
        assert main(["cliopts", f"--output={target}", "word"]) == 0
        assert target.read_text() == "word\n"

    def test_missing_output_argument(self, capsys):
        assert main(["cliopts", "-o"]) == ErrorCode.BADOPT
        assert "incorrect option ‘-o’" in capsys.readouterr().err

    def test_empty_word_is_rejected(self, capsys):
        assert main(["cliopts", "a", ""]) == ErrorCode.BADARG
        assert "incorrect argument ‘’" in capsys.readouterr().err

    def test_help(self, capsys):
        assert main(["cliopts", "--help"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("cliopts v")
        assert "Usage: cliopts [-Vv] [-h[filter]] [-o<file>] [--] words...\n" in out
        assert "-h, --help, --usage [filter]" in out
        assert " " * 32 + "filter:'all,options,arguments,<shortopt>,\n" + " " * 32 + "<longopt>'\n" in out
        assert "current: <stdout>" in out

    def test_help_with_filter(self, capsys):
        assert main(["cliopts", "--usage=arguments"]) == 0
        out = capsys.readouterr().out
        assert "words to echo" in out
        assert "--verbose" not in out

    def test_version(self, capsys):
        assert main(["cliopts", "-V", "ignored"]) == 0
        out = capsys.readouterr().out
        assert "GNU GPL version 3 or later" in out
        assert "ignored" not in out

    def test_unknown_debug_level(self, capsys):
        assert main(["cliopts", "--debug=bogus", "x"]) == ErrorCode.BADARG
        err = capsys.readouterr().err
        assert "incorrect option ‘--debug’" in err
        assert "Usage: cliopts" in err

    def test_unknown_option(self, capsys):
        assert main(["cliopts", "--nope"]) == ErrorCode.LONG
        err = capsys.readouterr().err
        assert "unknown option ‘--nope’" in err
        assert "Usage: cliopts" in err


class TestLogging:
    def test_parse_steps_are_logged_once_enabled(self, table, make_config):
        sink = io.StringIO()
        handler_id = setup_logger("DEBUG", sink)
        try:
            parse_options(make_config(["--config=x", "--", "arg"], Recorder(), table))
        finally:
            reset_logger(handler_id)

        text = sink.getvalue()
        assert "long option '--config=x' resolved to entry 2" in text
        assert "option parsing stopped" in text

    def test_bad_level_leaves_logging_disabled(self, table, make_config):
        with pytest.raises(ValueError):
            setup_logger("bogus", io.StringIO())

        sink = io.StringIO()
        handler_id = logger.add(sink, level="DEBUG")
        try:
            parse_options(make_config(["--", "arg"], Recorder(), table))
        finally:
            logger.remove(handler_id)
        assert sink.getvalue() == ""

    def test_library_is_silent_by_default(self, table, make_config):
        sink = io.StringIO()
        handler_id = logger.add(sink, level="DEBUG")
        try:
            parse_options(make_config(["-a"], Recorder(), table))
        finally:
            logger.remove(handler_id)
        assert sink.getvalue() == ""
