"""resumerag: resume assistant core: chunking, embeddings, retrieval, structured edits."""

__version__ = "0.1.0"
