"""Form definition vocabulary, validation and pure structural helpers."""
