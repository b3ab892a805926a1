"""Pydantic models exchanged at the API boundary (see ``io``)."""
