"""
Adapters — implementations of the install pipeline collaborators.
"""
