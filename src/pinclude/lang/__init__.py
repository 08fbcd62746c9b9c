"""Host manifest language: grammar, AST, scopes and environments.

Import from the submodules directly; the AST and the parser refer to each
other through this package, so it re-exports nothing.
"""
