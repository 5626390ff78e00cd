"""
thunklink utilities package
"""
