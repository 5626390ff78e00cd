"""
Passes: thunk rewriting
"""
