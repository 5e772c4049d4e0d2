"""Summarization workflow and the page status machine."""
