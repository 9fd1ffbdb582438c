"""Market tick engine for the tycoon economy simulation."""
