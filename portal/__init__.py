"""Game portal backend: accounts, game catalogue and trophy uploads."""
