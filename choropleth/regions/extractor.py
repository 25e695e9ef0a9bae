"""Region extractor.

Scans geometry markup (typically SVG) for candidate region identifiers: the
values of ``id`` attributes plus the tokens of ``class`` attributes. The
document is not parsed as XML, so malformed markup still yields candidates.
"""

import html
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from choropleth.config import get_config

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"""(?<![\w:.-])id\s*=\s*(["'])(.*?)\1""", re.DOTALL)
_CLASS_PATTERN = re.compile(r"""(?<![\w:.-])class\s*=\s*(["'])(.*?)\1""", re.DOTALL)


def _attribute_values(pattern: re.Pattern, markup: str) -> List[str]:
    return [html.unescape(value) for _, value in pattern.findall(markup)]


def _generated_id_pattern(reserved_prefixes: Iterable[str]) -> Optional[re.Pattern]:
    """
    Pattern for ids generated by drawing tools, such as ``defs4`` or ``clipPath12``.

    A reserved prefix (case-sensitive) may be followed by one capitalized word
    and a number. Region names that merely begin with the same letters, such as
    ``Clipperton`` or ``markermeer``, do not match.
    """
    prefixes = [re.escape(p) for p in reserved_prefixes if p]
    if not prefixes:
        return None
    return re.compile(r"^(?:" + "|".join(prefixes) + r")(?:[A-Z][A-Za-z]*)?(?:[-_]?\d+)*$")


def extract_ids(markup: str, reserved_prefixes: Iterable[str]) -> Set[str]:
    """
    Collect element ids that are not generated by a drawing tool.

    Args:
        markup: Geometry document text
        reserved_prefixes: Prefixes of generated, non-region ids

    Returns:
        Set of ids
    """
    generated = _generated_id_pattern(reserved_prefixes)
    ids = set()
    for value in _attribute_values(_ID_PATTERN, markup):
        value = value.strip()
        if not value:
            continue
        if generated is not None and generated.match(value):
            continue
        ids.add(value)
    return ids


def extract_class_tokens(markup: str, min_length: int, style_marker: str) -> Set[str]:
    """
    Collect class tokens that look like semantic region groupings.

    Args:
        markup: Geometry document text
        min_length: Tokens shorter than this are dropped
        style_marker: Tokens containing this substring are dropped (case-insensitive)

    Returns:
        Set of class tokens
    """
    marker = style_marker.lower()
    tokens = set()
    for value in _attribute_values(_CLASS_PATTERN, markup):
        for token in value.split():
            if len(token) < min_length:
                continue
            if marker and marker in token.lower():
                continue
            tokens.add(token)
    return tokens


def extract_regions(
    markup: Optional[Union[str, bytes]],
    reserved_prefixes: Optional[Iterable[str]] = None,
    min_class_token_length: Optional[int] = None,
    style_marker: Optional[str] = None,
) -> List[str]:
    """
    Extract candidate region identifiers from a geometry document.

    A document that cannot be read yields an empty list rather than an error,
    so matching degrades to every region being unmatched.

    Args:
        markup: Geometry document text or UTF-8 bytes
        reserved_prefixes: Override for the configured reserved id prefixes
        min_class_token_length: Override for the configured minimum class token length
        style_marker: Override for the configured style marker

    Returns:
        Sorted, deduplicated candidate identifiers
    """
    extraction_config = get_config().extraction
    if reserved_prefixes is None:
        reserved_prefixes = extraction_config.reserved_id_prefixes
    if min_class_token_length is None:
        min_class_token_length = extraction_config.min_class_token_length
    if style_marker is None:
        style_marker = extraction_config.style_marker

    if markup is None:
        logger.warning("No geometry document provided; no regions extracted")
        return []

    if isinstance(markup, bytes):
        try:
            markup = markup.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning(f"Geometry document is not valid UTF-8; no regions extracted: {e}")
            return []

    candidates = extract_ids(markup, reserved_prefixes) | extract_class_tokens(
        markup, min_class_token_length, style_marker
    )
    if not candidates:
        logger.warning("No candidate regions found in geometry document")
        return []

    logger.info(f"Extracted {len(candidates)} candidate regions")
    return sorted(candidates)


def extract_regions_from_file(path: Union[str, Path], **kwargs) -> List[str]:
    """
    Read a geometry document from disk and extract its candidate regions.

    Args:
        path: Path to the geometry document
        **kwargs: Overrides forwarded to extract_regions

    Returns:
        Sorted candidate identifiers, or an empty list if the file cannot be read
    """
    try:
        content = Path(path).read_bytes()
    except OSError as e:
        logger.warning(f"Could not read geometry document {path}: {e}")
        return []
    return extract_regions(content, **kwargs)
