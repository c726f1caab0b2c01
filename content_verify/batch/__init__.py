"""
Batch migration: source readers, destination writers and pipelines.
"""
