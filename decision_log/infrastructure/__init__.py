"""Infrastructure — IO adapters: database sessions, key-value file store, crypto, Gist API, logging."""
