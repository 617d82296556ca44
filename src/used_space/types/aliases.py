"""Type aliases using modern PEP 695 syntax."""

from collections.abc import Callable

# Canonical absolute path used as the store key
type EntryPath = str

# Callable removing one filesystem object (file unlink or recursive tree removal)
type Remover = Callable[[str], None]
