"""State/store layer.

This package owns everything that is persisted: the key-value store wrapper,
the marker transition policy and the events derived from marker diffs.
"""
