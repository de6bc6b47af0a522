"""
Data Cleaner
Text normalization for scraped page fragments
"""
import re
import html
from collections import Counter
from typing import Iterable, List, Optional, Tuple


STOP_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "a", "an", "is", "are", "was", "were", "be", "been", "has", "have", "had",
    "that", "this", "these", "those", "from", "as", "it", "its", "will", "would",
    "said", "says", "also", "after", "over", "into", "about", "than", "their",
    "they", "them", "there", "which", "while", "who", "what", "when", "where",
    "more", "most", "some", "such", "other", "could", "should", "being",
    "just", "only", "very", "your", "yours", "ours", "ourselves", "him", "his",
    "her", "hers", "she", "not", "can", "did", "does", "out", "new", "news",
})


class DataCleaner:
    """
    Text cleaner for scraped titles and summaries
    """

    URL_PATTERN = re.compile(r'https?://\S+|www\.\S+')
    EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')
    MULTIPLE_SPACES = re.compile(r'\s+')
    WORD_PATTERN = re.compile(r"[a-z][a-z'-]*[a-z]")
    KEY_PATTERN = re.compile(r'[^a-z0-9 ]+')

    def __init__(
        self,
        remove_urls: bool = False,
        remove_emails: bool = True,
        lowercase: bool = False,
        max_length: Optional[int] = None,
    ):
        """
        Args:
            remove_urls: drop URLs
            remove_emails: drop e-mail addresses
            lowercase: lowercase the text
            max_length: truncate to this many characters (no ellipsis)
        """
        self.remove_urls = remove_urls
        self.remove_emails = remove_emails
        self.lowercase = lowercase
        self.max_length = max_length

    def clean(self, text: str) -> str:
        """
        Clean one piece of text

        Args:
            text: raw text (may contain entities and layout whitespace)

        Returns:
            cleaned text
        """
        if not text:
            return ""

        text = html.unescape(text)

        if self.remove_urls:
            text = self.URL_PATTERN.sub(' ', text)

        if self.remove_emails:
            text = self.EMAIL_PATTERN.sub(' ', text)

        if self.lowercase:
            text = text.lower()

        text = self.MULTIPLE_SPACES.sub(' ', text).strip()

        if self.max_length and len(text) > self.max_length:
            text = text[:self.max_length].rstrip()

        return text

    def normalize_key(self, text: str) -> str:
        """Lowercased, punctuation-free form used to compare titles."""
        lowered = self.clean(text).lower()
        return self.MULTIPLE_SPACES.sub(' ', self.KEY_PATTERN.sub(' ', lowered)).strip()

    def tokenize(self, text: str) -> List[str]:
        """Content words of a text: lowercase, stop words and words of 3 chars or fewer dropped."""
        words = self.WORD_PATTERN.findall(self.clean(text).lower())
        return [w for w in words if len(w) > 3 and w not in STOP_WORDS]

    @staticmethod
    def contains_any(text: str, markers: Iterable[str]) -> bool:
        lowered = (text or "").lower()
        return any(marker in lowered for marker in markers)


# Convenience helpers
_default_cleaner = DataCleaner()


def normalize_title(text: str) -> str:
    return _default_cleaner.normalize_key(text)


def top_terms(texts: Iterable[str], top_k: int = 10) -> List[Tuple[str, int]]:
    """
    Rank content words by frequency.

    Ties keep the order in which words were first seen.
    """
    counts: Counter = Counter()
    for text in texts:
        counts.update(_default_cleaner.tokenize(text))
    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda pair: -pair[1])
    return ranked[:max(0, top_k)]
