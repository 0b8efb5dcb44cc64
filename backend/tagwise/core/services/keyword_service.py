from __future__ import annotations

import re
from collections import Counter

# Standard English stopwords plus filler adverbs and common light verbs
STOPWORDS: frozenset[str] = frozenset({
    "a", "about", "above", "after", "again", "against", "all", "am", "an", "and", "any", "are", "aren't",
    "as", "at", "be", "because", "been", "before", "being", "below", "between", "both", "but", "by",
    "can't", "cannot", "could", "couldn't", "did", "didn't", "do", "does", "doesn't", "doing", "don't",
    "down", "during", "each", "few", "for", "from", "further", "had", "hadn't", "has", "hasn't", "have",
    "haven't", "having", "he", "he'd", "he'll", "he's", "her", "here", "here's", "hers", "herself", "him",
    "himself", "his", "how", "how's", "i", "i'd", "i'll", "i'm", "i've", "if", "in", "into", "is", "isn't",
    "it", "it's", "its", "itself", "let's", "me", "more", "most", "mustn't", "my", "myself", "no", "nor",
    "not", "of", "off", "on", "once", "only", "or", "other", "ought", "our", "ours", "ourselves", "out",
    "over", "own", "same", "shan't", "she", "she'd", "she'll", "she's", "should", "shouldn't", "so",
    "some", "such", "than", "that", "that's", "the", "their", "theirs", "them", "themselves", "then",
    "there", "there's", "these", "they", "they'd", "they'll", "they're", "they've", "this", "those",
    "through", "to", "too", "under", "until", "up", "very", "was", "wasn't", "we", "we'd", "we'll",
    "we're", "we've", "were", "weren't", "what", "what's", "when", "when's", "where", "where's", "which",
    "who", "who's", "whom", "why", "why's", "with", "won't", "would", "wouldn't", "you", "you'd",
    "you'll", "you're", "you've", "your", "yours", "yourself", "yourselves",
    "really", "quite", "just", "actually", "basically", "literally", "simply", "possibly", "maybe",
    "probably", "definitely", "highly", "mostly", "usually", "often", "always", "never",
    "get", "got", "go", "goes", "went", "gone", "make", "makes", "made", "take", "takes", "took", "taken",
    "see", "sees", "saw", "seen", "know", "knows", "knew", "known", "think", "thinks", "thought", "look",
    "looks", "looked", "want", "wants", "wanted", "use", "uses", "used", "find", "finds", "found", "give",
    "gives", "gave", "given", "tell", "tells", "told", "work", "works", "worked", "call", "calls",
    "called", "try", "trys", "tried", "keep", "keeps", "kept", "help", "helps", "helped", "show", "shows",
    "showed", "feel", "feels", "felt", "mean", "means", "meant", "let", "lets", "seem", "seems", "seemed",
    "become", "becomes", "became", "happen", "happens", "happened", "need", "needs", "needed", "like",
    "likes", "liked", "love", "loves", "loved",
})

DEFAULT_CANDIDATE_LIMIT = 50
MIN_KEYWORDS = 5
MAX_KEYWORDS = 15
WORDS_PER_EXTRA_KEYWORD = 100

_TIMESTAMP_RE = re.compile(r"\d{1,2}:\d{2}(?::\d{2}(?:\.\d{3})?)?")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_LETTER_RE = re.compile(r"[a-z]")


def clean_text(text: str) -> str:
    """Lowercase, drop transcript timestamps and punctuation, keep tokens with a letter."""
    without_timestamps = _TIMESTAMP_RE.sub(" ", text)
    basic = _WHITESPACE_RE.sub(" ", _NON_ALNUM_RE.sub(" ", without_timestamps.lower())).strip()
    return " ".join(word for word in basic.split(" ") if _LETTER_RE.search(word))


def _trim_stopwords(phrase: list[str]) -> list[str]:
    start, end = 0, len(phrase)
    while start < end and phrase[start] in STOPWORDS:
        start += 1
    while end > start and phrase[end - 1] in STOPWORDS:
        end -= 1
    return phrase[start:end]


def extract_candidates(
    text: str,
    ngram_range: tuple[int, int] = (1, 2),
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> list[str]:
    """Return n-gram phrases ranked by frequency, longer phrases first on ties.

    Leading and trailing stopwords are trimmed from every phrase, so an
    all-stopword phrase disappears and "the hotel" counts as "hotel".
    """
    words = [w for w in clean_text(text).split(" ") if w]
    if not words:
        return []

    counts: Counter[str] = Counter()
    low, high = ngram_range
    for n in range(low, high + 1):
        for i in range(len(words) - n + 1):
            phrase = _trim_stopwords(words[i:i + n])
            if not phrase:
                continue
            phrase_str = " ".join(phrase)
            if not _LETTER_RE.search(phrase_str):
                continue
            if len(phrase_str) < 3:
                continue
            if len(phrase) == 1 and phrase[0] in STOPWORDS:
                continue
            counts[phrase_str] += 1

    # Counter keys are already unique; ties on both keys keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: (-item[1], -len(item[0])))
    return [phrase for phrase, _ in ranked[:limit]]


def keyword_limit(text: str) -> int:
    """How many keywords to surface: 5, plus one per 100 words, capped at 15."""
    word_count = len(text.split())
    return min(MIN_KEYWORDS + word_count // WORDS_PER_EXTRA_KEYWORD, MAX_KEYWORDS)
