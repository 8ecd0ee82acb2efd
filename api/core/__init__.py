"""
Process-wide plumbing for the listings API.

- `config`: environment settings, validated before anything connects
- `db`: the asyncpg pool, bound-parameter query helpers, retried table setup
- `errors`: `{"error": ...}` response handlers
- `logging_config`: console / JSON log output

Nothing here knows about listing categories; that lives in `listings/`.
"""
