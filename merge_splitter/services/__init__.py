"""Processing services: redistribution engine, orchestration, summaries."""
