"""Prometheus metrics for vendor API observability.

One histogram around each signed round trip and one counter per outcome.
The embedding application decides how (and whether) to expose them.
"""

from prometheus_client import Counter, Histogram

vendor_api_duration_seconds = Histogram(
    "vendor_api_duration_seconds",
    "Duration of Withings API calls",
    ["resource", "action"],
)

vendor_responses_total = Counter(
    "vendor_responses_total",
    "Total Withings API responses by outcome",
    ["resource", "action", "outcome"],  # outcome: success, transport_error, vendor_error
)
