"""URL generation — name + parameters -> concrete URL.

Reads a built route table; never mutates it.
"""
