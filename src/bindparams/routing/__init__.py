"""Routing — trie router that captures path parameters for the binder.

Routes are registered during setup; a match yields the ordered path
parameters that the request's path lookup reads.
"""
