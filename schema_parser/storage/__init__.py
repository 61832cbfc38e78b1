# ==============================================
# DOCUMENT SOURCES
# ==============================================
#
# Where documents come from when they are not handed to SchemaParser
# directly.
#
# Modules:
# --------
# - mongo_client.py    → Sample / query a MongoDB collection
#
# ==============================================

from .mongo_client import MongoClient

__all__ = ["MongoClient"]
