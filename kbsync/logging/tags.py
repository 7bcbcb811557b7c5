# kbsync/logging/tags.py
"""
Bracketed prefixes for log messages.

Usage:
    logger.info(f"{CATALOG} Loaded {n} records")
"""

CATALOG = "[CATALOG]"
DETECT = "[DETECT]"
RECONCILE = "[RECONCILE]"
INGEST = "[INGEST]"
SYNC = "[SYNC]"
VECTOR_DB = "[VECTOR_DB]"
EMBEDDING = "[EMBEDDING]"
CACHE = "[CACHE]"
SOURCE = "[SOURCE]"
LOADER = "[LOADER]"
CLI = "[CLI]"
API = "[API]"
