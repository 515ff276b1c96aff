"""Query parser for the bookmark search grammar.

Syntax:
  word          optional term (any of the words may match)
  +word         required term
  |word         optional term (explicit form)
  -word         excluded term
  "two words"   quoted phrase, kept as one term
  device:x  os:x  browser:x  tag:x  #x      structured filters
  added:>30  clicked:<=7d                   age filters, in days
  -tag:x  -#x  -device:x ...                negated structured filters

Unrecognized tokens never raise; they are treated as plain terms.
"""
import re
from typing import List, Optional

from bookmark_search.models import (
    AddedPredicate,
    BrowserPredicate,
    ClickedPredicate,
    DevicePredicate,
    FilterSpec,
    OsPredicate,
    StructuredPredicate,
    TagPredicate,
)


# Longer operators first so '>' does not swallow '>='
_OPERATOR = r"(>=|<=|>|<|=)"

_VALUE_PATTERNS = [
    (re.compile(r"device:(.+)", re.IGNORECASE | re.DOTALL), DevicePredicate),
    (re.compile(r"os:(.+)", re.IGNORECASE | re.DOTALL), OsPredicate),
    (re.compile(r"browser:(.+)", re.IGNORECASE | re.DOTALL), BrowserPredicate),
    (re.compile(r"tag:(.+)", re.IGNORECASE | re.DOTALL), TagPredicate),
    (re.compile(r"#(.+)", re.DOTALL), TagPredicate),
]

# Durations are capped at nine digits; longer numbers stay free text
_AGE_PATTERNS = [
    (re.compile(r"added:" + _OPERATOR + r"(\d{1,9})d?", re.IGNORECASE), AddedPredicate),
    (re.compile(r"clicked:" + _OPERATOR + r"(\d{1,9})d?", re.IGNORECASE), ClickedPredicate),
]


def tokenize(query: str) -> List[str]:
    """Split a query on unquoted whitespace.

    A double quote toggles quoted mode, where whitespace stays part of the
    current token. Quote characters are removed from the returned tokens and
    tokens that end up empty are dropped.

    Args:
        query: Raw query string

    Returns:
        List of cleaned tokens
    """
    raw_tokens = []
    current = []
    in_quotes = False

    for char in query:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char.isspace() and not in_quotes:
            raw_tokens.append("".join(current))
            current = []
        else:
            current.append(char)
    raw_tokens.append("".join(current))

    tokens = []
    for raw in raw_tokens:
        cleaned = raw.replace('"', "").strip()
        if cleaned:
            tokens.append(cleaned)
    return tokens


def parse_predicate(token: str) -> Optional[StructuredPredicate]:
    """Parse a token as a structured predicate.

    Args:
        token: A cleaned query token (no negation prefix)

    Returns:
        The predicate, or None if the token is not a structured filter
    """
    for pattern, predicate_cls in _AGE_PATTERNS:
        match = pattern.fullmatch(token)
        if match:
            return predicate_cls(operator=match.group(1), duration=int(match.group(2)))

    for pattern, predicate_cls in _VALUE_PATTERNS:
        match = pattern.fullmatch(token)
        if match:
            return predicate_cls(value=match.group(1))

    return None


def parse_query(query: Optional[str]) -> FilterSpec:
    """Parse a raw query string into a FilterSpec.

    Args:
        query: Raw query string (may be empty or None)

    Returns:
        FilterSpec with the and/or/not terms and structured predicates
    """
    if not query or not query.strip():
        return FilterSpec()

    and_terms = []
    or_terms = []
    not_terms = []
    special = []
    not_special = []

    for token in tokenize(query):
        if token.startswith("-"):
            rest = token[1:]
            if not rest:
                continue
            predicate = parse_predicate(rest)
            if predicate is not None:
                not_special.append(predicate)
            else:
                not_terms.append(rest)
            continue

        predicate = parse_predicate(token)
        if predicate is not None:
            special.append(predicate)
        elif token.startswith("+"):
            if token[1:]:
                and_terms.append(token[1:])
        elif token.startswith("|"):
            if token[1:]:
                or_terms.append(token[1:])
        else:
            # Bare words are optional: "apple banana" matches either
            or_terms.append(token)

    return FilterSpec(
        and_terms=tuple(and_terms),
        or_terms=tuple(or_terms),
        not_terms=tuple(not_terms),
        special=tuple(special),
        not_special=tuple(not_special),
    )
