"""Loading notes and vocabulary from files."""

from .loaders import load_notes, load_vocabulary, read_records

__all__ = ["load_notes", "load_vocabulary", "read_records"]
