"""thunklink: relink Wally package thunks against a Rojo sourcemap."""

__version__ = "0.1.0"
