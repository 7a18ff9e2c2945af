"""
GlobalHTTP - Typed HTTP Client Helpers

Issues GET/PUT/POST/DELETE requests, attaches XML or JSON payloads built
from dataclasses, and turns response bodies back into typed values.
Includes a standalone XML/JSON serializer with namespace and DOCTYPE
control.
"""

__version__ = "0.1.0"
__author__ = "GlobalHTTP Contributors"
