"""
utility.py
provides option id ranges, the description tokenizer and banner builders.
"""
import shutil
from typing import Iterator, List, Optional, TextIO

ID_ARG = 0  # plain program argument, also the table terminator id

ID_USER = 0x00010000  # first id available for long-only options
ID_USER_MAX = 0x0001FFFF

ID_SECTION = 0x00020000  # display-only section headings
ID_SECTION_MAX = 0x0002FFFF

USAGE_OPT_PAD = 30  # alignment column of option descriptions
DEFAULT_COLUMNS = 80
MIN_COLUMNS = USAGE_OPT_PAD + 10

DESCRIBE_BUFFER_SIZE = 4096

WORD_SEPARATORS = " -,;:/?=+*\\"
FILTER_SEPARATORS = ",:|;&"


def id_value(opt_id) -> int:
    if isinstance(opt_id, str):
        if len(opt_id) != 1:
            raise ValueError(f"option id ‘{opt_id}’ is not a single character")
        return ord(opt_id)
    return int(opt_id)


def is_valid_short_opt(opt_id: int) -> bool:
    return 32 < opt_id < 127


def is_opt_user(opt_id: int) -> bool:
    return ID_USER <= opt_id <= ID_USER_MAX


def is_opt_section(opt_id: int) -> bool:
    return ID_SECTION <= opt_id <= ID_SECTION_MAX


def is_opt_arg(opt_id: int) -> bool:
    return opt_id == ID_ARG


def split_words(text: str, separators: str = WORD_SEPARATORS) -> Iterator[str]:
    """Split text into chunks, each ending with (and keeping) one separator."""
    start = 0
    for i, c in enumerate(text):
        if c in separators:
            yield text[start:i + 1]
            start = i + 1
    if start < len(text):
        yield text[start:]


def split_tokens(text: str, separators: str = FILTER_SEPARATORS) -> List[str]:
    tokens = []
    current = ""
    for c in text:
        if c in separators:
            if current:
                tokens.append(current)
            current = ""
        else:
            current += c
    if current:
        tokens.append(current)
    return tokens


def wrap_line(text: str, first_width: int, width: int) -> List[str]:
    """
    Greedy wrap of one description line.
    The first chunk may use first_width columns, the following ones width.
    A word longer than the available width is never split.
    """
    lines = []
    current = ""
    avail = first_width
    for word in split_words(text):
        if current and len(current) + len(word.rstrip()) > avail:
            lines.append(current.rstrip())
            current = word.lstrip()
            avail = width
        else:
            current += word
    if current or not lines:
        lines.append(current.rstrip())
    return lines


def get_max_columns(out: TextIO, columns: Optional[int] = None) -> int:
    if columns is not None:
        return max(columns, MIN_COLUMNS)
    isatty = getattr(out, "isatty", None)
    if isatty is not None and isatty():
        width = shutil.get_terminal_size((DEFAULT_COLUMNS, 24)).columns
        if width > MIN_COLUMNS:
            return width
    return DEFAULT_COLUMNS


def version_string(app_name: str, app_version: str, revision: str = "",
                   release: str = "", build: str = "") -> str:
    text = f"{app_name} v{app_version}"
    if release:
        text += f" {release}"
    details = ", ".join(part for part in (build, revision) if part)
    if details:
        text += f" (build:{details})"
    return text


def license_gpl(author: str, copyright: str, gplver_s: str, gplver_l: str) -> str:
    return (f"Copyright (C) {copyright} {author}.\n"
            f"License GPLv{gplver_s}: GNU GPL version {gplver_l} <http://gnu.org/licenses/gpl.html>.\n"
            "This is free software: you are free to change and redistribute it.\n"
            "There is NO WARRANTY, to the extent permitted by law.")


def license_gpl3plus(author: str, copyright: str) -> str:
    return license_gpl(author, copyright, "3+", "3 or later")


def version_string_lic(app_name: str, app_version: str, revision: str, license: str) -> str:
    return version_string(app_name, app_version, revision) + "\n\n" + license
