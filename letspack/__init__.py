"""Asset bundling for scripts, stylesheets and the Laravel Mix manifest."""

from .errors import ConfigError, PackError, ScriptMinifyError, StyleProcessError
from .packer import OutputRegistry, Packer

__all__ = [
    "ConfigError",
    "OutputRegistry",
    "PackError",
    "Packer",
    "ScriptMinifyError",
    "StyleProcessError",
]
