"""
Core infrastructure: configuration, logging, errors and concurrency helpers.
"""
