"""
Hierarchy: sourcemap model and instance path resolution
"""
