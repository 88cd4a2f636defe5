"""Type definitions for getcli."""

from typing import Literal, TypeAlias

# URL schemes a session may pin
Scheme: TypeAlias = Literal["http", "https"]

# Log levels
LogLevel: TypeAlias = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
