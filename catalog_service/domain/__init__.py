"""Domain records and identity/time strategies."""
