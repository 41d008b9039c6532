"""Honor reconciliation for board game catalogs."""
