"""Routing — ranked route patterns and path-to-state resolution.

Linking configurations are flattened into route records, ranked most
specific first, and matched against the incoming path to build the
nested navigator state.
"""
