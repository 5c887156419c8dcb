"""
Lines Module - Black Box Interface

Purpose: Rebuild line boundaries from an arbitrarily chunked text stream
Interface: LineSplitter.feed(), LineSplitter.flush(), split_lines()
Hidden: Tail buffering across chunk boundaries
"""

from .splitter import LineSplitter, split_lines

__all__ = ["LineSplitter", "split_lines"]
