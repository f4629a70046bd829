"""Post-deploy smoke checks executed from the app container."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from datetime import date, timedelta
from uuid import uuid4

from fitbook.core.security import create_access_token

BASE_URL = "http://localhost:8000"


def request(
    path: str,
    *,
    method: str = "GET",
    body: dict[str, object] | None = None,
    headers: dict[str, str] | None = None,
    expected: int = 200,
) -> bytes:
    payload = None
    req_headers = {"Accept": "application/json"}
    if headers:
        req_headers.update(headers)
    if body is not None:
        payload = json.dumps(body).encode("utf-8")
        req_headers["Content-Type"] = "application/json"

    request_obj = urllib.request.Request(
        f"{BASE_URL}{path}",
        data=payload,
        method=method,
        headers=req_headers,
    )
    try:
        with urllib.request.urlopen(request_obj, timeout=30) as response:
            content = response.read()
            status = response.getcode()
    except urllib.error.HTTPError as exc:  # pragma: no cover - runtime smoke script
        body_text = exc.read().decode("utf-8", errors="ignore")
        if exc.code == expected:
            return body_text.encode("utf-8")
        raise RuntimeError(f"{method} {path} -> {exc.code}: {body_text}") from exc

    if status != expected:
        raise RuntimeError(f"{method} {path} -> {status}, expected {expected}")
    return content


def main() -> None:
    for endpoint in ["/health", "/ready", "/docs", "/metrics"]:
        request(endpoint, expected=200)

    # Fresh ids keep the check independent from existing data.
    trainer_id = uuid4()
    client_headers = {
        "Authorization": f"Bearer {create_access_token(str(uuid4()), role='client')}",
    }
    booking_body = {
        "trainer_id": str(trainer_id),
        "date": (date.today() + timedelta(days=3)).isoformat(),
        "time": "10:00",
        "duration_minutes": 60,
        "price": "40.00",
    }

    booking = json.loads(
        request("/api/v1/bookings", method="POST", body=booking_body, headers=client_headers, expected=201),
    )
    request("/api/v1/bookings", method="POST", body=booking_body, headers=client_headers, expected=409)
    request(
        f"/api/v1/bookings/{booking['id']}/cancel",
        method="POST",
        headers=client_headers,
        expected=200,
    )

    print("Smoke checks passed.")


if __name__ == "__main__":
    main()
