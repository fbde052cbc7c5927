"""
User profiles and statistics.
"""
