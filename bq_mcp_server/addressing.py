"""Project resolution for schema and table-listing calls."""


def resolve_project(default_project: str, override: str | None = None) -> str:
    """Return the per-call override if non-empty, else the server default.

    Never raises. If both are empty the result is "" and the BigQuery call
    made with it fails downstream as a BackendError.
    """
    if override:
        return override
    return default_project
