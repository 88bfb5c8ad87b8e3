import enum
import sys
from collections import namedtuple
from typing import Any, Callable, Iterator, NamedTuple, Optional, Sequence, Tuple, Union

from loguru import logger

from .utility import (DESCRIBE_BUFFER_SIZE, ID_ARG, id_value, is_opt_user,
                      is_valid_short_opt)


class ErrorCode(enum.IntEnum):
    FAULT = 1
    SHORT = 2
    LONG = 3
    LONGID = 4
    BADOPT = 5
    BADARG = 6


class ParseFlag(enum.IntFlag):
    NONE = 0
    SILENT = 1 << 0       # no error messages, no usage
    NOUSAGE = 1 << 1      # no banner, no usage summary
    SIMPLEUSAGE = 1 << 2  # usage summary is "[options] [arguments]"
    MAINSECTION = 1 << 3  # without filter, list only the first section
    DEFAULT = NONE


class OptionException(Exception):
    def __init__(self, message: str, code: int = ErrorCode.FAULT):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        return self.message


class OptionSpecException(OptionException):
    pass


class OptionParseException(OptionException):
    pass


class OptionConfigError(OptionSpecException):
    def __init__(self, what: str):
        super().__init__(f"error: {what} is missing from the option config", ErrorCode.FAULT)


class OptionNotExistsException(OptionParseException):
    def __init__(self, option: str, code: int):
        super().__init__(f"error: unknown option ‘{option}’", code)


class BadOptionIdException(OptionParseException):
    def __init__(self, option: str):
        super().__init__(f"error: bad id value for option ‘{option}’", ErrorCode.LONGID)


class OptionRejectedException(OptionParseException):
    def __init__(self, option: str, code: int):
        super().__init__(f"error: incorrect option ‘{option}’", code)


class ArgumentRejectedException(OptionParseException):
    def __init__(self, arg: str, code: int):
        super().__init__(f"error: incorrect argument ‘{arg}’", code)


class CallbackResult:
    is_continue = False
    is_error = False

    @property
    def is_exit(self) -> bool:
        return not self.is_continue

    @property
    def exit_code(self) -> int:
        return 0

    def __eq__(self, other):
        return type(self) is type(other) and self.exit_code == other.exit_code

    def __hash__(self):
        return hash((type(self).__name__, self.exit_code))

    def __repr__(self):
        return f"{type(self).__name__}()"


class Continue(CallbackResult):
    is_continue = True


class ExitOk(CallbackResult):
    pass


class ExitError(CallbackResult):
    is_error = True

    def __init__(self, code: int = 1):
        self.code = abs(int(code)) or 1

    @property
    def exit_code(self) -> int:
        return self.code

    def __repr__(self):
        return f"ExitError({self.code})"


CONTINUE = Continue()
EXIT_OK = ExitOk()


class OptionDescriptor(namedtuple("OptionDescriptor", "id long_name arg_placeholder description")):
    """
    One row of the option table.

    id is a printable character (given as a one-character str or its code),
    a value of the ID_USER range for long-only options, a value of the
    ID_SECTION range for headings, or ID_ARG to document program arguments.
    arg_placeholder is 'name' for a mandatory argument, '[name]' for an
    optional one. An entry reusing a previous id with only a long_name is an
    alias of that previous entry.
    """
    __slots__ = ()

    def __new__(cls, id, long_name: Optional[str] = None, arg_placeholder: Optional[str] = None,
                description: Optional[str] = None):
        return super().__new__(cls, id_value(id), long_name, arg_placeholder, description)

    @property
    def short(self) -> Optional[str]:
        return chr(self.id) if is_valid_short_opt(self.id) else None


class Cursor:
    """Position in the argument vector, advanced by callbacks consuming arguments."""

    def __init__(self, args: Sequence[str], index: int = 1):
        self.args = args
        self.index = index

    @property
    def next_token(self) -> Optional[str]:
        if self.index + 1 < len(self.args):
            return self.args[self.index + 1]
        return None

    def advance(self, n: int = 1) -> int:
        if n < 0:
            raise ValueError("cursor can only move forward")
        self.index += n
        return self.index

    def stop(self) -> None:
        self.index = len(self.args)

    def __repr__(self):
        return f"Cursor({self.index}/{len(self.args)})"


class DescribeBuffer:
    def __init__(self, capacity: int = DESCRIBE_BUFFER_SIZE):
        self.capacity = capacity
        self._chunks = []
        self._size = 0

    def write(self, text: str) -> int:
        chunk = text[:self.capacity - self._size]
        self._chunks.append(chunk)
        self._size += len(chunk)
        return len(chunk)

    def getvalue(self) -> str:
        return "".join(self._chunks)

    def __len__(self):
        return self._size


class Handle(NamedTuple):
    id: int
    value: Optional[str]
    cursor: Cursor
    inline: bool = False  # value came from '--name=value', nothing to consume

    @property
    def short(self) -> Optional[str]:
        return chr(self.id) if is_valid_short_opt(self.id) else None


class Describe(NamedTuple):
    id: int
    buffer: DescribeBuffer

    @property
    def short(self) -> Optional[str]:
        return chr(self.id) if is_valid_short_opt(self.id) else None


Request = Union[Handle, Describe]
OptionCallback = Callable[[Request, "ParseConfig"], CallbackResult]
DescriptorTable = Sequence[Union[OptionDescriptor, Tuple]]


class ParseConfig:
    def __init__(self, args: Sequence[str], callback: Optional[OptionCallback],
                 descriptors: DescriptorTable, version_text: str = "", user_data: Any = None,
                 flags: ParseFlag = ParseFlag.DEFAULT, columns: Optional[int] = None):
        self.args = args
        self.callback = callback
        self.descriptors = descriptors
        self.version_text = version_text
        self.user_data = user_data
        self.flags = flags
        self.columns = columns

    @property
    def program(self) -> str:
        return self.args[0].rsplit("/", 1)[-1] if self.args else ""


def is_describable(opt_id) -> bool:
    opt_id = id_value(opt_id)
    return is_valid_short_opt(opt_id) or is_opt_user(opt_id)


def iter_descriptors(table: DescriptorTable) -> Iterator[Tuple[int, OptionDescriptor]]:
    for index in range(len(table)):
        desc = descriptor_at(table, index)
        if desc.id == ID_ARG and desc.description is None:
            return
        yield index, desc


def find_short(opt_id, table: DescriptorTable) -> Optional[int]:
    opt_id = id_value(opt_id)
    if not is_valid_short_opt(opt_id):
        return None
    for index, desc in iter_descriptors(table):
        if desc.id == opt_id:
            return index
    return None


def find_long(token: str, table: DescriptorTable) -> Optional[Tuple[int, Optional[str]]]:
    for index, desc in iter_descriptors(table):
        name = desc.long_name
        if name is None or not token.startswith(name):
            continue
        rest = token[len(name):]
        if not rest:
            return index, None
        if rest[0] == "=":
            return index, rest[1:]
    return None


def is_alias(desc: OptionDescriptor) -> bool:
    return desc.long_name is not None and desc.arg_placeholder is None and desc.description is None


def descriptor_at(table: DescriptorTable, index: int) -> OptionDescriptor:
    desc = table[index]
    return desc if isinstance(desc, OptionDescriptor) else OptionDescriptor(*desc)


def find_alias(index: int, table: DescriptorTable) -> Optional[int]:
    """Return the index of the entry aliased by table[index], if it is an alias."""
    desc = descriptor_at(table, index)
    if not is_alias(desc):
        return None
    for i, other in iter_descriptors(table):
        if i >= index:
            break
        if other.id == desc.id:
            return i
    return None


def check_config(config: Optional[ParseConfig]) -> None:
    if config is None:
        raise OptionConfigError("config")
    if config.descriptors is None:
        raise OptionConfigError("descriptor table")
    if not config.args:
        raise OptionConfigError("argument vector")


def report_error(exc: OptionException, config: Optional[ParseConfig], show_usage: bool) -> CallbackResult:
    status = ExitError(exc.code)
    if config is not None and config.flags & ParseFlag.SILENT:
        return status
    print(exc.message, file=sys.stderr)
    if show_usage:
        from .usage import usage
        return usage(status, config)
    return status


def call_callback(config: ParseConfig, request: Request) -> CallbackResult:
    if config.callback is None:
        return CONTINUE
    result = config.callback(request, config)
    if not isinstance(result, CallbackResult):
        raise TypeError(f"option callback returned {result!r}, expected a CallbackResult")
    logger.debug("callback({}, {}) -> {!r}", type(request).__name__, request.id, result)
    return result


def _parse(config: ParseConfig) -> CallbackResult:
    args = config.args
    table = config.descriptors
    cursor = Cursor(args, 1)
    stop_options = False

    while cursor.index < len(args):
        arg = args[cursor.index]

        if stop_options or not arg.startswith("-") or arg == "-":
            result = call_callback(config, Handle(ID_ARG, arg, cursor))
            if result.is_error:
                raise ArgumentRejectedException(arg, result.exit_code)
            if result.is_exit:
                return EXIT_OK

        elif arg == "--":
            logger.debug("'--' at {}: option parsing stopped", cursor.index)
            stop_options = True

        elif arg.startswith("--"):
            found = find_long(arg[2:], table)
            if found is None:
                raise OptionNotExistsException(arg, ErrorCode.LONG)
            i_opt, value = found
            long_name = descriptor_at(table, i_opt).long_name
            primary = find_alias(i_opt, table)
            if primary is not None:
                i_opt = primary
            opt_id = descriptor_at(table, i_opt).id
            if not is_describable(opt_id):
                raise BadOptionIdException(f"--{long_name}")
            logger.debug("long option '{}' resolved to entry {}", arg, i_opt)

            inline = value is not None
            if not inline:
                value = cursor.next_token
            result = call_callback(config, Handle(opt_id, value, cursor, inline))
            if result.is_error:
                raise OptionRejectedException(f"--{long_name}", result.exit_code)
            if result.is_exit:
                return EXIT_OK

        else:
            short_options = arg[1:]
            for pos, opt in enumerate(short_options):
                i_opt = find_short(opt, table)
                if i_opt is None:
                    raise OptionNotExistsException(f"-{opt}", ErrorCode.SHORT)
                value = cursor.next_token if pos == len(short_options) - 1 else None
                result = call_callback(config, Handle(ord(opt), value, cursor))
                if result.is_error:
                    raise OptionRejectedException(f"-{opt}", result.exit_code)
                if result.is_exit:
                    return EXIT_OK

        cursor.advance()

    return CONTINUE


def parse_options(config: ParseConfig) -> CallbackResult:
    """
    Parse config.args, calling config.callback for each option and argument.

    Returns CONTINUE when all arguments were processed, EXIT_OK when the
    callback asked to stop, or ExitError(code) after printing the error and
    the usage on stderr.
    """
    try:
        check_config(config)
    except OptionSpecException as e:
        return report_error(e, config, show_usage=False)

    try:
        return _parse(config)
    except OptionParseException as e:
        logger.debug("parse aborted: {}", e.message)
        return report_error(e, config, show_usage=True)
