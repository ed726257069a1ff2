"""Fix application, backups, fallback and rollback."""
