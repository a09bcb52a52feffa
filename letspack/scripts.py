from __future__ import annotations

from typing import Mapping

from calmjs.parse import es5
from calmjs.parse.exceptions import ECMASyntaxError, ProductionError
from calmjs.parse.unparsers.es5 import minify_print

from .errors import ScriptMinifyError


def minify_scripts(codes: Mapping[str, str], mangle: bool = True) -> str:
    """Minify a batch of named sources into a single script.

    Local identifiers are renamed when ``mangle`` is set; globals keep their
    names so separately bundled files can still reach each other. Sources are
    emitted in mapping order. The parser understands ES5 only; ES2015+ syntax
    such as ``const`` or arrow functions is reported as a syntax error.
    """
    chunks = []
    for name, source in codes.items():
        try:
            program = es5(source)
        except (ECMASyntaxError, ProductionError) as exc:
            raise ScriptMinifyError(f"{name}: {exc} (only ES5 syntax is supported)") from exc
        chunks.append(minify_print(program, obfuscate=mangle, obfuscate_globals=False))
    return "\n".join(chunk for chunk in chunks if chunk)
