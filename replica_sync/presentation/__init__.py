"""
Presentation Layer - Surface HTTP (liveness).
"""
