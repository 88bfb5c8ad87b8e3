import sys
from typing import List, Optional, TextIO

from loguru import logger

from .options import (CONTINUE, CallbackResult, Describe, DescribeBuffer, OptionDescriptor,
                      OptionSpecException, ParseConfig, ParseFlag, call_callback, check_config,
                      find_alias, is_alias, is_describable, iter_descriptors, report_error)
from .utility import (USAGE_OPT_PAD, get_max_columns, is_opt_arg, is_opt_section,
                      is_valid_short_opt, split_tokens, wrap_line)


def usage_filter(filter: Optional[str], index: int, section: Optional[int], config: ParseConfig) -> bool:
    """
    Tell whether table entry `index` is selected by `filter`.

    The filter is a list of tokens separated by any of ",:|;&". A token
    selects an entry when it is 'all', its short option character, its long
    name (or one of its aliases), or the name of its section. Case is ignored
    except for short option characters.
    """
    if filter is None:
        return True

    entries = dict(iter_descriptors(config.descriptors))
    opt = entries[index]
    section_name = entries[section].arg_placeholder if section is not None else None
    long_name = None if is_opt_section(opt.id) else opt.long_name

    for token in split_tokens(filter):
        name = token.lower()
        if long_name and name != long_name.lower():
            for other in entries.values():
                if other.id == opt.id and is_alias(other) and other.long_name.lower() == name:
                    name = long_name.lower()
                    break
        if ((len(token) == 1 and ord(token) == opt.id)
                or name == "all"
                or (long_name and name == long_name.lower())
                or (section_name and name == section_name.lower())):
            return True
    return False


def describe_filter(buffer: DescribeBuffer, config: ParseConfig) -> CallbackResult:
    """Describe the filters accepted by usage(), for a '--help[=filter]' option."""
    buffer.write("filter:'all")
    for _, opt in iter_descriptors(config.descriptors):
        if is_opt_section(opt.id) and opt.arg_placeholder:
            buffer.write(f",{opt.arg_placeholder}")
    buffer.write(",<shortopt>,<longopt>'")
    return CONTINUE


def _print_usage_summary(config: ParseConfig, out: TextIO, max_columns: int) -> None:
    if config.flags & ParseFlag.NOUSAGE:
        return

    if config.version_text:
        out.write(f"{config.version_text}\n\n")
    line = f"Usage: {config.program}"
    out.write(line)

    if config.flags & ParseFlag.SIMPLEUSAGE:
        out.write(" [options] [arguments]\n")
        return

    entries = list(iter_descriptors(config.descriptors))
    flags = "".join(opt.short for i, opt in entries
                    if opt.arg_placeholder is None and is_valid_short_opt(opt.id)
                    and find_alias(i, config.descriptors) is None)

    # continuation lines start under the first item
    indent = len(line)
    n_printed = indent
    opened = False
    for c in flags:
        if opened and n_printed + 2 > max_columns:
            out.write("]\n" + " " * indent)
            n_printed = indent
            opened = False
        if not opened:
            out.write(" [-")
            n_printed += 3
            opened = True
        out.write(c)
        n_printed += 1
    if opened:
        out.write("]")
        n_printed += 1

    items = []
    has_args = False
    for i, opt in entries:
        if opt.arg_placeholder is None or find_alias(i, config.descriptors) is not None:
            continue
        if is_opt_arg(opt.id):
            if not has_args:
                items.append(" [--]")
                has_args = True
            items.append(f" {opt.arg_placeholder}")
        elif is_valid_short_opt(opt.id):
            if opt.arg_placeholder.startswith("["):
                items.append(f" [-{opt.short}{opt.arg_placeholder}]")
            else:
                items.append(f" [-{opt.short}<{opt.arg_placeholder}>]")
    if not has_args:
        items.append(" [--]")

    for item in items:
        if n_printed > indent and n_printed + len(item) > max_columns:
            out.write("\n" + " " * indent)
            n_printed = indent
        out.write(item)
        n_printed += len(item)
    out.write("\n")


def _option_header(index: int, opt: OptionDescriptor, config: ParseConfig) -> str:
    header = "  "
    if is_valid_short_opt(opt.id):
        header += f"-{opt.short}"
    names = [opt.long_name] if opt.long_name is not None else []
    for i, other in iter_descriptors(config.descriptors):
        if i > index and other.id == opt.id and is_alias(other):
            names.append(other.long_name)
    for name in names:
        header += f"{', ' if len(header) > 2 else ''}--{name}"
    if opt.arg_placeholder:
        header += f"{' ' if len(header) > 2 else ''}{opt.arg_placeholder}"
    return header


def _description_lines(opt: OptionDescriptor, config: ParseConfig) -> List[str]:
    lines = opt.description.splitlines() if opt.description else []
    if config.callback is not None and is_describable(opt.id):
        buffer = DescribeBuffer()
        result = call_callback(config, Describe(opt.id, buffer))
        if result.is_continue and len(buffer):
            lines.extend(buffer.getvalue().splitlines())
    return lines


def _print_description(out: TextIO, header: str, lines: List[str], is_section: bool,
                       max_columns: int) -> None:
    if is_section:
        for line in lines:
            for part in wrap_line(line, max_columns, max_columns):
                out.write(part + "\n")
        return

    n_printed = len(header)
    out.write(header)
    # a header longer than the pad column puts the description on its own line
    if n_printed > USAGE_OPT_PAD:
        out.write("\n")
        n_printed = 0

    indent = USAGE_OPT_PAD + 2
    width = max_columns - indent
    for k, line in enumerate(lines):
        if k == 0:
            out.write(" " * (USAGE_OPT_PAD - n_printed) + ": ")
        else:
            out.write(" " * indent)
        parts = wrap_line(line, width, width)
        out.write(parts[0] + "\n")
        for part in parts[1:]:
            out.write(" " * indent + part + "\n")


def usage(status: CallbackResult, config: ParseConfig, filter: Optional[str] = None) -> CallbackResult:
    """
    Print the program banner, usage summary and option list.

    Output goes to stderr when status is an error, to stdout otherwise.
    The given status is returned unchanged so that callbacks can write
    `return usage(EXIT_OK, config)`.
    """
    try:
        check_config(config)
    except OptionSpecException as e:
        return report_error(e, config, show_usage=False)

    if config.flags & ParseFlag.SILENT:
        return status

    out = sys.stderr if status.is_error else sys.stdout
    if status.is_error:
        out.write("\n")

    max_columns = get_max_columns(out, config.columns)
    _print_usage_summary(config, out, max_columns)

    current_section = None
    for i, opt in iter_descriptors(config.descriptors):
        is_section = is_opt_section(opt.id)
        if is_section:
            if (filter is None and (current_section is not None or i > 0)
                    and config.flags & ParseFlag.MAINSECTION):
                break
            current_section = i
        if not usage_filter(filter, i, current_section, config):
            continue

        header = ""
        if not is_section:
            if find_alias(i, config.descriptors) is not None:
                continue
            header = _option_header(i, opt, config)

        lines = _description_lines(opt, config)
        if not lines:
            out.write(header + "\n")
            continue
        _print_description(out, header, lines, is_section, max_columns)

    out.write("\n")
    logger.debug("usage printed to {} (filter={!r})", "stderr" if status.is_error else "stdout", filter)
    return status
