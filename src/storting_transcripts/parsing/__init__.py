"""Parsing of raw transcript documents."""
from __future__ import annotations

from .transcripts import parse_transcript

__all__ = ["parse_transcript"]
