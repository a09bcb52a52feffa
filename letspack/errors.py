from __future__ import annotations


class PackError(Exception):
    """Base class for failures raised inside a bundling pipeline."""


class ScriptMinifyError(PackError):
    pass


class StyleProcessError(PackError):
    pass


class ConfigError(PackError):
    pass
