"""
Application Layer - Ports (interfaces) vers les services externes.
"""
