"""Build metadata stamped by release builds. Empty in development checkouts."""

VERSION = ""
COMMIT = ""
BUILT_BY = ""
BUILT_AT = ""
