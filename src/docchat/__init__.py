"""docchat — document ingestion and conversation search for a document-chat app."""
