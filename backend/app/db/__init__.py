"""Database metadata: the declarative Base shared by models, the store and migrations."""
