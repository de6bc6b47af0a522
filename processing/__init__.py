"""
Processing Module
Text cleaning and term statistics
"""
from .cleaner import DataCleaner, STOP_WORDS, normalize_title, top_terms

__all__ = [
    "DataCleaner",
    "STOP_WORDS",
    "normalize_title",
    "top_terms",
]
