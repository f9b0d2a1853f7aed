"""
REST APIs core service for people, books and a small calculator
"""

__version__ = "0.3.0"
