# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Naming scheme constants shared by the cache pool and the options store.

These values must match the records already present in an options table,
so they are reproduced exactly.
"""

RESERVED_KEY_SYMBOLS = "{}()/\\@:"
NAMESPACE_SEPARATOR = "/"

TABLE_NAME_OPTIONS = "options"
FIELD_NAME_OPTION_NAME = "option_name"
FIELD_NAME_OPTION_VALUE = "option_value"

OPTION_NAME_PREFIX_TRANSIENT = "_transient_"
OPTION_NAME_PREFIX_TIMEOUT = "timeout_"
OPTION_NAME_MAX_LENGTH = 191

# The substrate convention for "no expiration".
TTL_NO_EXPIRATION = 0
