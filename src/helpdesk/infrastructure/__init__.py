"""
Infrastructure
==============

Cross-cutting technical infrastructure shared by all bounded contexts.
"""
