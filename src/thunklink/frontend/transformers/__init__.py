"""
Lark transformers from parse trees to thunk AST nodes
"""
