"""
Analysis: require path extraction and thunk shape checks
"""
