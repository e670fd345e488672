"""Utility helpers for fzf-nav."""
