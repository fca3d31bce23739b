"""Application services: ingestion, retrieval, answering and document registration."""
