"""Infrastructure Layer.

Adapters implementing domain ports. All file I/O lives here.
"""
