"""Dataset loading and timing log helpers."""

from .analysis_log import append_timings, format_timing_line
from .movies import MOVIE_FIELD_COUNT, iter_movies, movie_from_fields, read_movies, split_fields

__all__ = [
    "MOVIE_FIELD_COUNT",
    "append_timings",
    "format_timing_line",
    "iter_movies",
    "movie_from_fields",
    "read_movies",
    "split_fields",
]
