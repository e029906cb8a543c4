"""Book cover identification and summarization."""
