"""
Record processing: models, schema detection, markup stripping and patching.
"""
