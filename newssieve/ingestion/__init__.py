"""
NewsSieve Ingestion Module
==========================

HTTP transport, RSS/Atom parsing and HTML cleaning.
"""
