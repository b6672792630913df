"""
Processing pipelines for the backend.
"""
