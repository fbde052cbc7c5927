"""
Progress tracking against roadmaps.
"""
