from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Token tables
# ---------------------------------------------------------------------------

PRE_TOKENS: Tuple[str, ...] = ("사전", "pre", "before", "baseline", "1차", "1회", "t1", "time1")
POST_TOKENS: Tuple[str, ...] = ("사후", "post", "after", "followup", "2차", "2회", "t2", "time2")

IMPORTANCE_TOKENS: Tuple[str, ...] = ("중요도", "중요성", "중요", "importance")
PERFORMANCE_TOKENS: Tuple[str, ...] = ("만족도", "만족", "성과", "performance", "satisfaction")

# Single-syllable 전 (before) / 후 (after) are only trusted when delimited by
# brackets, whitespace or the label edges.
_PRE_SYLLABLE_RE = re.compile(r"(^|[\s(\[])전($|[\s)\]])")
_POST_SYLLABLE_RE = re.compile(r"(^|[\s(\[])후($|[\s)\]])")

_BRACKETED_RE = re.compile(r"\[[^\]]*\]|\([^)]*\)")
_WHITESPACE_RE = re.compile(r"\s+")
_KEY_STRIP_RE = re.compile(r"[^a-z0-9가-힣]", re.IGNORECASE)
_ASCII_WORD_RE = re.compile(r"^[a-z0-9]+$", re.IGNORECASE)


def normalize_label(label: str) -> str:
    """Lowercase, drop [..] and (..) segments, collapse whitespace."""
    text = _BRACKETED_RE.sub(" ", label.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def _strip_tokens(text: str, tokens: Iterable[str]) -> str:
    for token in tokens:
        text = re.sub(re.escape(token), " ", text, flags=re.IGNORECASE)
    return text


def _finish_key(text: str) -> str:
    return _KEY_STRIP_RE.sub("", text).strip()


def _contains_token(text: str, token: str) -> bool:
    # ASCII tokens must stand alone ("pre" should not fire inside "present").
    if _ASCII_WORD_RE.match(token):
        pattern = r"(?<![A-Za-z0-9_])%s(?![A-Za-z0-9_])" % re.escape(token)
        return re.search(pattern, text, flags=re.IGNORECASE) is not None
    return token in text


# ---------------------------------------------------------------------------
# Pre/post detection
# ---------------------------------------------------------------------------

def detect_timepoint(label: str) -> Optional[str]:
    """
    Return 'pre', 'post' or None for a question label.

    A label carrying both pre and post tokens is ambiguous and yields None.
    """
    lower = label.lower()
    has_pre = any(_contains_token(lower, t) for t in PRE_TOKENS)
    has_post = any(_contains_token(lower, t) for t in POST_TOKENS)

    if has_pre and has_post:
        return None
    if has_pre:
        return "pre"
    if has_post:
        return "post"

    if _PRE_SYLLABLE_RE.search(label):
        return "pre"
    if _POST_SYLLABLE_RE.search(label):
        return "post"
    return None


def timepoint_key(label: str) -> str:
    """Bucket key for pre/post pairing: the label with timepoint markers removed."""
    key = _strip_tokens(normalize_label(label), PRE_TOKENS + POST_TOKENS)
    key = _PRE_SYLLABLE_RE.sub(" ", key)
    key = _POST_SYLLABLE_RE.sub(" ", key)
    return _finish_key(key)


# ---------------------------------------------------------------------------
# Importance/performance detection
# ---------------------------------------------------------------------------

def detect_ipa_type(label: str) -> Optional[str]:
    """Return 'importance', 'performance' or None (also None when both match)."""
    lower = label.lower()
    has_importance = any(t in lower for t in IMPORTANCE_TOKENS)
    has_performance = any(t in lower for t in PERFORMANCE_TOKENS)

    if has_importance and has_performance:
        return None
    if has_importance:
        return "importance"
    if has_performance:
        return "performance"
    return None


def ipa_key(label: str) -> str:
    """Bucket key for importance/performance pairing."""
    return _finish_key(_strip_tokens(normalize_label(label), IMPORTANCE_TOKENS + PERFORMANCE_TOKENS))


# ---------------------------------------------------------------------------
# Bucketing
# ---------------------------------------------------------------------------

def pair_by_key(
    tagged: Iterable[Tuple[str, str, str]],
    first_side: str,
    second_side: str,
) -> List[Tuple[str, str]]:
    """
    Pair question ids that share a bucket key.

    `tagged` yields (question_id, side, key). Within each bucket the ids of
    each side are sorted lexicographically and zipped; surplus ids on the
    longer side stay unpaired. Buckets are emitted in first-seen order.
    """
    buckets: Dict[str, Dict[str, List[str]]] = {}
    for question_id, side, key in tagged:
        if not key or side not in (first_side, second_side):
            continue
        bucket = buckets.setdefault(key, {first_side: [], second_side: []})
        bucket[side].append(question_id)

    pairs: List[Tuple[str, str]] = []
    for bucket in buckets.values():
        firsts = sorted(bucket[first_side])
        seconds = sorted(bucket[second_side])
        pairs.extend(zip(firsts, seconds))
    return pairs
