"""Business logic services.

Facades hold authorization checks and persistence and are called by routes.
Pure rule modules (authorization, criteria, security) take their inputs explicitly.
"""
