"""In-memory student record store with hash table and AVL tree back ends and a shell."""

__all__ = ["avl", "cli", "database", "hash_table", "records"]