"""Naming — route table construction from a traversal log.

Routes are registered during setup as a flat enter/exit log and compiled
into an immutable name -> pattern table exactly once.
"""
