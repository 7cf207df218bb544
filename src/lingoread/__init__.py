"""Bilingual reader backend: EPUB paragraph and chapter extraction."""
