"""Shared option tables and a recording callback for the cliopts tests."""

import pytest

from cliopts import (CONTINUE, ID_ARG, ID_SECTION, ID_USER, Describe, OptionDescriptor,
                     ParseConfig)

OPT_ID_COLOR = ID_USER
OPT_ID_LOGFILE = ID_USER + 1


class Recorder:
    """Callback recording every request, with optional per-id behaviour."""

    def __init__(self, results=None, consume=(), describe=None):
        self.calls = []
        self.describes = []
        self.results = results or {}
        self.consume = set(consume)
        self.describe = describe or {}

    def __call__(self, request, config):
        if isinstance(request, Describe):
            self.describes.append(request.id)
            text = self.describe.get(request.id)
            if text is None:
                return self.results.get("describe", CONTINUE)
            request.buffer.write(text)
            return CONTINUE
        self.calls.append((request.id, request.value, request.inline))
        if request.id in self.consume and request.value is not None and not request.inline:
            request.cursor.advance()
        return self.results.get(request.id, CONTINUE)


@pytest.fixture
def table():
    return (
        OptionDescriptor("a", "all", None, "select all"),
        OptionDescriptor("b", "brief", None, "brief output"),
        OptionDescriptor("c", "config", "file", "read config from file"),
        OptionDescriptor("v", "verbose", "[level]", "verbosity level"),
        OptionDescriptor(OPT_ID_COLOR, "color", "[when]", "colorize output"),
        OptionDescriptor(OPT_ID_LOGFILE, "log-file", "path", None),
        OptionDescriptor(0, None, None, None),
    )


@pytest.fixture
def sectioned_table():
    return (
        OptionDescriptor(ID_SECTION, None, "main", "Main options:"),
        OptionDescriptor("h", "help", "[filter]", "show usage"),
        OptionDescriptor("h", "usage"),
        OptionDescriptor("q", "quiet", None, "be quiet"),
        OptionDescriptor(ID_SECTION + 1, None, "output", "Output options:"),
        OptionDescriptor("o", "output", "file", "output file"),
        OptionDescriptor(ID_ARG, None, "input", "input file"),
    )


@pytest.fixture
def make_config():
    def _make(args, callback=None, descriptors=None, **kwargs):
        return ParseConfig(["prog"] + list(args), callback, descriptors, **kwargs)
    return _make
