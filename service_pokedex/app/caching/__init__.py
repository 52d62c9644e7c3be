"""
Pokedex caching package.

Detail records are immutable upstream, so the cache never expires or
evicts; its size is bounded by the catalog.
"""
