"""
Learning roadmaps: CRUD, status changes and AI-assisted generation.
"""
