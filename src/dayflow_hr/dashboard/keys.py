def dashboard_summary_key(user_id: str) -> str:
    return f"dashboard:summary:{user_id}"


def dashboard_statistics_key(user_id: str) -> str:
    return f"dashboard:statistics:{user_id}"


def invalidate_dashboard(cache, user_id: str, *, statistics: bool = False) -> None:
    """Drop the cached dashboard views a write for ``user_id`` made stale."""
    cache.delete(dashboard_summary_key(user_id))
    if statistics:
        cache.delete(dashboard_statistics_key(user_id))
