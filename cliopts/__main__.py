import sys
from typing import List, Optional

from loguru import logger

from . import __version__
from .log import setup_logger
from .options import (CONTINUE, EXIT_OK, Describe, ErrorCode, ExitError, OptionDescriptor,
                      ParseConfig, parse_options)
from .usage import describe_filter, usage
from .utility import ID_ARG, ID_SECTION, ID_USER, license_gpl3plus, version_string_lic

OPT_ID_DEBUG = ID_USER

DEMO_OPTIONS = (
    OptionDescriptor(ID_SECTION, None, "options", "Options:"),
    OptionDescriptor("h", "help", "[filter]", "show usage\n"),
    OptionDescriptor("h", "usage"),
    OptionDescriptor("V", "version", None, "show version"),
    OptionDescriptor("v", "verbose", None, "increase verbosity"),
    OptionDescriptor("o", "output", "file", "write words to file"),
    OptionDescriptor(OPT_ID_DEBUG, "debug", "[level]", "log parsing steps on stderr"),
    OptionDescriptor(ID_SECTION + 1, None, "arguments", "Arguments:"),
    OptionDescriptor(ID_ARG, None, "words...", "words to echo"),
)


class DemoState:
    def __init__(self):
        self.verbose = 0
        self.output: Optional[str] = None
        self.words: List[str] = []


def demo_callback(request, config):
    state = config.user_data

    if isinstance(request, Describe):
        if request.short == "h":
            return describe_filter(request.buffer, config)
        if request.short == "o":
            request.buffer.write(f"current: {state.output or '<stdout>'}")
            return CONTINUE
        return ExitError()

    if request.id == ID_ARG:
        if not request.value:
            return ExitError(ErrorCode.BADARG)
        state.words.append(request.value)
    elif request.short == "h":
        return usage(EXIT_OK, config, request.value if request.inline else None)
    elif request.short == "V":
        print(config.version_text)
        return EXIT_OK
    elif request.short == "v":
        state.verbose += 1
    elif request.short == "o":
        if request.value is None:
            return ExitError(ErrorCode.BADOPT)
        if not request.inline:
            request.cursor.advance()
        state.output = request.value
    elif request.id == OPT_ID_DEBUG:
        level = request.value.upper() if request.inline else "DEBUG"
        try:
            logger.level(level)
        except ValueError:
            return ExitError(ErrorCode.BADARG)
        setup_logger(level)
    return CONTINUE


def main(argv: Optional[List[str]] = None) -> int:
    state = DemoState()
    config = ParseConfig(
        argv if argv is not None else sys.argv,
        demo_callback,
        DEMO_OPTIONS,
        version_text=version_string_lic("cliopts", __version__, "",
                                        license_gpl3plus("cliopts authors", "2018")),
        user_data=state,
    )
    result = parse_options(config)
    if result.is_exit:
        return result.exit_code

    text = " ".join(state.words)
    if state.verbose:
        text = f"{len(state.words)} word(s): {text}"
    if state.output is None:
        print(text)
    else:
        with open(state.output, "w") as f:
            f.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
