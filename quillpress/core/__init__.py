"""Core building blocks shared by the QuillPress server: logging, monitoring,
domain errors, the database layer, content processing and I/O schemas."""
