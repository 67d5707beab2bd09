"""
Container health check for the sales analytics API.

Probes the liveness route (`/api/health` unless HEALTHCHECK_PATH says
otherwise) on the local port and exits 0 when the API answers with a
non-error status. Database reachability is checked at startup, not here.
"""

from __future__ import annotations

import os
from urllib.error import URLError
from urllib.request import urlopen


def main() -> int:
    port = os.getenv("PORT", "8000")
    path = os.getenv("HEALTHCHECK_PATH", "/api/health")
    url = f"http://127.0.0.1:{port}{path}"

    try:
        with urlopen(url, timeout=2) as response:
            return 0 if 200 <= response.status < 400 else 1
    except (URLError, TimeoutError, ValueError):
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
