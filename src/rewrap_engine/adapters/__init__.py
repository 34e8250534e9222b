"""Host adapters that embed the rewrite engine in UI toolkits."""
