"""Constant values shared by the server modules."""

PROJECT_NAME = "QuillPress"

API_V1_STR = "/api/v1"
