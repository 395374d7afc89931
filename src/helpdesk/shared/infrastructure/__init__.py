"""
Infrastructure Layer
=====================

Low-level technical concerns shared by all modules:
- Logging setup
- Password hashing and access tokens
"""
