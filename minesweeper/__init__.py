"""Minesweeper engine whose games live in a key-value store between moves."""
