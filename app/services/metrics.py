"""Dashboard counters.

The owner's three counters are fetched together on a small thread pool and
awaited jointly; a failing counter only blanks its own card.
"""

from concurrent.futures import ThreadPoolExecutor

from .api_client import ApiError

COUNT_KEYS = ("count", "total", "total_applicants", "selected_applicants", "selected")


def normalize_count(value, *keys):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, list):
        return len(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    if isinstance(value, dict):
        for k in keys + COUNT_KEYS:
            if k in value:
                return normalize_count(value[k])
    return None


def active_inactive_counts(value):
    if isinstance(value, list):
        active = sum(1 for r in value if isinstance(r, dict) and r.get("is_active") is not False)
        return active, len(value) - active
    return (
        normalize_count(value, "active", "active_count", "activeCount"),
        normalize_count(value, "inactive", "inactive_count", "inactiveCount"),
    )


def gather(calls):
    """Run ``{name: fn}`` concurrently; return ``(results, errors)``."""
    results, errors = {}, {}
    with ThreadPoolExecutor(max_workers=max(len(calls), 1)) as pool:
        futures = {name: pool.submit(fn) for name, fn in calls.items()}
        for name, fut in futures.items():
            try:
                results[name] = fut.result()
            except ApiError as e:
                errors[name] = e
    return results, errors


def owner_metrics(client):
    results, errors = gather({
        "total": client.total_applicants,
        "selected": client.selected_applicants,
        "active_inactive": client.active_inactive_applicants,
    })
    active, inactive = (None, None)
    if "active_inactive" in results:
        active, inactive = active_inactive_counts(results["active_inactive"])
    counts = {
        "total_applicants": normalize_count(results.get("total"), "total_applicants"),
        "selected_applicants": normalize_count(results.get("selected"), "selected_applicants"),
        "active_count": active,
        "inactive_count": inactive,
    }
    return counts, errors


def partner_metrics(client, user_id):
    errors = {}
    selected = None
    if user_id is not None:
        try:
            selected = normalize_count(client.selected_by_user(user_id), "selected_applicants")
        except ApiError as e:
            errors["selected"] = e
    return {"selected_applicants": selected}, errors
