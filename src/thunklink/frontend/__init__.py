"""
Frontend: Luau parsing for thunks and exported-type scanning for targets
"""
