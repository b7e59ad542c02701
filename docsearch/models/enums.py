"""Enumeration types for docsearch data models."""

from enum import Enum


class SourceType(str, Enum):
    PDF = "pdf"
    URL = "url"
    TEXT = "text"


class RetrievalStatus(str, Enum):
    OK = "ok"
    NO_DATA = "no_data"
    NO_MATCHES = "no_matches"
