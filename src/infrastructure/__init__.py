"""Infrastructure Layer.

Concrete adapters implementing the domain ports.
"""
