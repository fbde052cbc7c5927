"""
File uploads backed by S3.
"""
