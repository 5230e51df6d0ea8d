"""Document names for the persisted stores."""


class CacheKeys:
    """File names of the JSON documents kept under the data directory."""

    STREAMS_DOCUMENT = "streams-cache.json"
    STATS_DOCUMENT = "stats.json"
    LOGS_DOCUMENT = "logs.json"
    PROVIDERS_DOCUMENT = "addons.json"
    CREDENTIALS_DOCUMENT = "config.json"
