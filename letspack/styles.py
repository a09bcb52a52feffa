from __future__ import annotations

import logging
import xml.dom
from pathlib import Path
from typing import Dict, Iterator, List, Set, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

import cssutils
import rcssmin
import requests
from cssutils.css import CSSRule, CSSStyleSheet
from cssutils.helper import path2url

from .errors import StyleProcessError

logger = logging.getLogger(__name__)

PROFILE_MESSAGES = ("Property: Invalid value", "Property: Unknown Property")


class _ProfileValidationFilter(logging.Filter):
    """Drops cssutils' CSS 2.1 profile complaints about prefixed and modern values."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(text in message for text in PROFILE_MESSAGES)


_cssutils_logger = logging.getLogger(f"{__name__}.cssutils")
_cssutils_logger.addFilter(_ProfileValidationFilter())
cssutils.log.setLog(_cssutils_logger)
cssutils.log.setLevel(logging.ERROR)

Declaration = Tuple[str, str, str]

PROPERTY_PREFIXES: Dict[str, Tuple[str, ...]] = {
    "appearance": ("-webkit-", "-moz-"),
    "backdrop-filter": ("-webkit-",),
    "box-decoration-break": ("-webkit-",),
    "clip-path": ("-webkit-",),
    "hyphens": ("-webkit-", "-ms-"),
    "mask": ("-webkit-",),
    "mask-image": ("-webkit-",),
    "tab-size": ("-moz-",),
    "text-size-adjust": ("-webkit-", "-moz-", "-ms-"),
    "user-select": ("-webkit-", "-moz-", "-ms-"),
}

VALUE_PREFIXES: Dict[Tuple[str, str], Tuple[str, ...]] = {
    ("display", "flex"): ("-webkit-box", "-ms-flexbox"),
    ("display", "inline-flex"): ("-webkit-inline-box", "-ms-inline-flexbox"),
    ("display", "grid"): ("-ms-grid",),
    ("position", "sticky"): ("-webkit-sticky",),
}


def _parser(fetcher=None) -> cssutils.CSSParser:
    return cssutils.CSSParser(raiseExceptions=False, validate=False, fetcher=fetcher)


def _url_key(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return str(Path(url2pathname(parsed.path)).resolve())
    return url


class ImportFetcher:
    """cssutils fetcher that loads each stylesheet of an import graph once.

    A sheet that was already imported, the entry included, comes back as an
    empty comment, so import cycles and diamonds inline every file a single
    time. Missing files return ``None``, which cssutils records as an
    unresolved import.
    """

    def __init__(self, entry_href: str) -> None:
        self.seen: Set[str] = {_url_key(entry_href)}

    def __call__(self, url: str):
        key = _url_key(url)
        if key in self.seen:
            logger.debug("Skipping %s, already imported", url)
            return None, "/* imported */"
        self.seen.add(key)

        if urlparse(url).scheme == "file":
            try:
                return None, Path(key).read_text(encoding="utf-8")
            except (OSError, ValueError) as exc:
                logger.debug("Cannot read %s: %s", url, exc)
                return None
        try:
            resp = requests.get(url, timeout=30, allow_redirects=False)
        except requests.RequestException as exc:
            logger.debug("Cannot fetch %s: %s", url, exc)
            return None
        if not 200 <= resp.status_code < 300:
            return None
        return None, resp.text


def _check_imports(sheet: CSSStyleSheet) -> None:
    for rule in sheet.cssRules:
        if rule.type != CSSRule.IMPORT_RULE:
            continue
        if not rule.hrefFound:
            raise StyleProcessError(f"Cannot resolve @import {rule.href!r} from {sheet.href}")
        if rule.styleSheet is not None:
            _check_imports(rule.styleSheet)


def _style_rules(rules) -> Iterator[CSSRule]:
    for rule in rules:
        if rule.type == CSSRule.STYLE_RULE:
            yield rule
        elif rule.type == CSSRule.MEDIA_RULE:
            yield from _style_rules(rule.cssRules)


def _declarations(rule) -> List[Declaration]:
    return [(prop.name, prop.value, prop.priority) for prop in rule.style.getProperties(all=True)]


def _set_declarations(rule, declarations: List[Declaration]) -> None:
    rule.style.cssText = "; ".join(
        f"{name}: {value} !{priority}" if priority else f"{name}: {value}"
        for name, value, priority in declarations
    )


def _dedupe(declarations: List[Declaration]) -> List[Declaration]:
    # Identical declarations keep their last position; differing values are
    # fallbacks and stay.
    seen = set()
    kept: List[Declaration] = []
    for declaration in reversed(declarations):
        if declaration in seen:
            continue
        seen.add(declaration)
        kept.append(declaration)
    kept.reverse()
    return kept


def inline_imports(css: str, source: Path) -> CSSStyleSheet:
    """Parse ``css`` as the content of ``source`` and inline its ``@import`` graph.

    Imports are resolved relative to the importing file. Media-qualified
    imports end up wrapped in ``@media`` blocks.
    """
    href = path2url(str(source.resolve()))
    sheet = _parser(ImportFetcher(href)).parseString(css, href=href)
    _check_imports(sheet)
    logger.debug("Resolving imports of %s", source)
    resolved = cssutils.resolveImports(sheet)
    # resolveImports rebuilds the sheet with profile validation on; parse it
    # again so later declaration edits are not validated against CSS 2.1.
    return _parser().parseString(resolved.cssText.decode("utf-8"), href=href)


def add_vendor_prefixes(sheet: CSSStyleSheet) -> CSSStyleSheet:
    for rule in _style_rules(sheet.cssRules):
        declarations = _declarations(rule)
        names = {name for name, _, _ in declarations}
        pairs = {(name, value) for name, value, _ in declarations}

        prefixed: List[Declaration] = []
        for name, value, priority in declarations:
            for prefix in PROPERTY_PREFIXES.get(name, ()):
                if prefix + name not in names:
                    prefixed.append((prefix + name, value, priority))
            for variant in VALUE_PREFIXES.get((name, value.lower()), ()):
                if (name, variant) not in pairs:
                    prefixed.append((name, variant, priority))
            prefixed.append((name, value, priority))

        if len(prefixed) != len(declarations):
            _set_declarations(rule, prefixed)
    return sheet


def _merge_rules(container) -> None:
    index = 0
    while index < len(container.cssRules):
        rules = container.cssRules
        rule = rules[index]
        if rule.type == CSSRule.MEDIA_RULE:
            _merge_rules(rule)
            index += 1
            continue
        if rule.type != CSSRule.STYLE_RULE:
            index += 1
            continue

        following = rules[index + 1] if index + 1 < len(rules) else None
        if (
            following is not None
            and following.type == CSSRule.STYLE_RULE
            and following.selectorText == rule.selectorText
        ):
            _set_declarations(rule, _declarations(rule) + _declarations(following))
            container.deleteRule(index + 1)
            continue

        declarations = _declarations(rule)
        if not declarations:
            container.deleteRule(index)
            continue
        deduped = _dedupe(declarations)
        if len(deduped) != len(declarations):
            _set_declarations(rule, deduped)
        index += 1


def minify_stylesheet(sheet: CSSStyleSheet) -> str:
    _merge_rules(sheet)
    return rcssmin.cssmin(sheet.cssText.decode("utf-8"))


def process_stylesheet(css: str, source: Path) -> str:
    """Inline imports, add vendor prefixes and minify, in that order."""
    try:
        sheet = inline_imports(css, source)
        add_vendor_prefixes(sheet)
        return minify_stylesheet(sheet)
    except (xml.dom.DOMException, RecursionError) as exc:
        raise StyleProcessError(f"{source}: {exc}") from exc
