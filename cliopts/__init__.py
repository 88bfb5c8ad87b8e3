from loguru import logger

from .options import (CONTINUE, EXIT_OK, CallbackResult, Continue, Cursor, Describe,
                      DescribeBuffer, ErrorCode, ExitError, ExitOk, Handle, OptionConfigError,
                      OptionDescriptor, OptionException, OptionNotExistsException,
                      OptionParseException, OptionRejectedException, OptionSpecException,
                      ParseConfig, ParseFlag, find_alias, find_long, find_short, is_describable,
                      iter_descriptors, parse_options)
from .usage import describe_filter, usage, usage_filter
from .utility import (ID_ARG, ID_SECTION, ID_SECTION_MAX, ID_USER, ID_USER_MAX, USAGE_OPT_PAD,
                      license_gpl3plus, version_string, version_string_lic)

__version__ = "0.1.0"

logger.disable("cliopts")
