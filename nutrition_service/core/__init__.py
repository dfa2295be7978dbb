"""
Core module: configuration, logging, errors and external-call policy
"""
