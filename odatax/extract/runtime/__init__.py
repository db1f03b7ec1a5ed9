"""Runtime layer: partitioning, REST transport and split extraction."""
