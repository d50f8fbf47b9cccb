"""Console logging, per-run transcripts and the issue JSON Lines log."""
