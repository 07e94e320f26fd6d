"""Search and filter engine for transcript sessions."""

from .filters import (
    SessionFilter,
    duration_to_seconds,
    filter_sessions,
    is_time_in_range,
    parse_bound_date,
    parse_session_date,
)
from .query import CompiledQuery, Token, TokenType, compile_query, evaluate_query, tokenize, to_postfix
from .sorting import sort_key, sort_sessions
from .speakers import extract_line_speaker, first_line_speaker, iter_content_speakers
from .text import levenshtein_distance, match_phrase, match_term, normalize_text

__all__ = [
    "CompiledQuery",
    "SessionFilter",
    "Token",
    "TokenType",
    "compile_query",
    "duration_to_seconds",
    "evaluate_query",
    "extract_line_speaker",
    "filter_sessions",
    "first_line_speaker",
    "is_time_in_range",
    "iter_content_speakers",
    "levenshtein_distance",
    "match_phrase",
    "match_term",
    "normalize_text",
    "parse_bound_date",
    "parse_session_date",
    "sort_key",
    "sort_sessions",
    "to_postfix",
    "tokenize",
]
