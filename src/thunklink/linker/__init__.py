"""
Linker: packages directory traversal and per-thunk orchestration
"""
