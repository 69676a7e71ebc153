"""
kvtable.api

HTTP surface (FastAPI) over key-value tables.
"""

# Package marker.
