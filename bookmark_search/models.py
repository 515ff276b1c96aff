"""Data model shared by the query parser, evaluator and ranker."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Bookmark:
    """A single bookmark record.

    Records are immutable; ``tags`` is stored as a tuple so a bookmark can be
    used as a key in score maps.
    """
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    tags: Tuple[str, ...] = ()
    added: Optional[datetime] = None
    clicked: int = 0
    last: Optional[datetime] = None
    device: Optional[str] = None
    os: Optional[str] = None
    browser: Optional[str] = None
    user_agent: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags or ()))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict using the store's key names."""
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "notes": self.notes,
            "tags": list(self.tags),
            "added": self.added.isoformat() if self.added else None,
            "clicked": self.clicked,
            "last": self.last.isoformat() if self.last else None,
            "device": self.device,
            "os": self.os,
            "browser": self.browser,
        }


# ============================================================================
# Structured predicates
# ============================================================================

@dataclass(frozen=True)
class DevicePredicate:
    value: str
    kind: ClassVar[str] = "device"


@dataclass(frozen=True)
class OsPredicate:
    value: str
    kind: ClassVar[str] = "os"


@dataclass(frozen=True)
class BrowserPredicate:
    value: str
    kind: ClassVar[str] = "browser"


@dataclass(frozen=True)
class TagPredicate:
    value: str
    kind: ClassVar[str] = "tag"


@dataclass(frozen=True)
class AddedPredicate:
    """Days since the bookmark was added, compared with ``operator``."""
    operator: Optional[str] = None
    duration: Optional[int] = None
    kind: ClassVar[str] = "added"


@dataclass(frozen=True)
class ClickedPredicate:
    """Days since the bookmark was last used, compared with ``operator``.

    ``clicked:=0`` is special: it selects bookmarks that were never clicked.
    """
    operator: Optional[str] = None
    duration: Optional[int] = None
    kind: ClassVar[str] = "clicked"


StructuredPredicate = Union[
    DevicePredicate,
    OsPredicate,
    BrowserPredicate,
    TagPredicate,
    AddedPredicate,
    ClickedPredicate,
]


def predicate_to_dict(predicate: StructuredPredicate) -> Dict[str, Any]:
    """Describe a predicate as ``{"type": kind, ...fields}``."""
    if isinstance(predicate, (AddedPredicate, ClickedPredicate)):
        return {
            "type": predicate.kind,
            "operator": predicate.operator,
            "duration": predicate.duration,
        }
    return {"type": predicate.kind, "value": predicate.value}


# ============================================================================
# Filter specification and result
# ============================================================================

@dataclass(frozen=True)
class FilterSpec:
    """Parsed form of a query, split into five disjoint buckets."""
    and_terms: Tuple[str, ...] = ()
    or_terms: Tuple[str, ...] = ()
    not_terms: Tuple[str, ...] = ()
    special: Tuple[StructuredPredicate, ...] = ()
    not_special: Tuple[StructuredPredicate, ...] = ()

    @property
    def has_text_terms(self) -> bool:
        """True if any free-text bucket is non-empty."""
        return bool(self.and_terms or self.or_terms or self.not_terms)

    @property
    def is_empty(self) -> bool:
        return not (self.has_text_terms or self.special or self.not_special)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "and": list(self.and_terms),
            "or": list(self.or_terms),
            "not": list(self.not_terms),
            "special": [predicate_to_dict(p) for p in self.special],
            "notSpecial": [predicate_to_dict(p) for p in self.not_special],
        }


@dataclass
class FilterResult:
    """Outcome of one filter pass.

    ``scores`` only has entries when the query contained free-text terms;
    structured-only queries leave it empty and keep the input order.
    """
    data: List[Bookmark]
    options: FilterSpec
    query: str
    scores: Dict[Bookmark, int] = field(default_factory=dict)

    def score_for(self, bookmark: Bookmark) -> Optional[int]:
        return self.scores.get(bookmark)
