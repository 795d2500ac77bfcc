"""Helpers to call the heatmap microservice from a front end."""

from __future__ import annotations

from typing import Optional

import zmq

from settings import load_settings

_SETTINGS = load_settings()
DEFAULT_PORT = _SETTINGS.heatmap_port
TIMEOUT_MS = _SETTINGS.timeout_ms
_CONTEXT = zmq.Context.instance()


# ---------- Low-level send helper ----------
def _make_socket(port: int):
    socket = _CONTEXT.socket(zmq.REQ)
    socket.setsockopt(zmq.RCVTIMEO, TIMEOUT_MS)
    socket.setsockopt(zmq.SNDTIMEO, TIMEOUT_MS)
    socket.setsockopt(zmq.LINGER, 0)
    socket.connect(f"tcp://localhost:{port}")
    return socket


def _send_json(port: int, payload: dict):
    socket = _make_socket(port)
    try:
        socket.send_json(payload)
        return socket.recv_json(), None
    except zmq.error.Again:
        return None, f"Timed out contacting service on port {port}."
    except zmq.ZMQError as exc:
        return None, f"Service error on port {port}: {exc}"
    except ValueError:
        return None, f"Malformed reply from service on port {port}."
    finally:
        socket.close()


def _checked(response, error, what: str):
    if error:
        return None, error
    if not isinstance(response, dict):
        return None, f"Malformed {what} reply."
    if response.get("status") != "ok":
        return None, response.get("error", f"Unknown {what} error.")
    return response, None


# ---------- Microservice callers ----------
def heatmap_month(
    year: int,
    month: int,
    is_dark: bool = False,
    flt: Optional[dict] = None,
    today: Optional[str] = None,
    port: int = DEFAULT_PORT,
):
    """Cell colors for one calendar month."""
    payload = {
        "request_type": "heatmap_month",
        "year": year,
        "month": month,
        "is_dark": is_dark,
    }
    if flt is not None:
        payload["filter"] = flt
    if today is not None:
        payload["today"] = today
    response, error = _send_json(port, payload)
    return _checked(response, error, "heatmap")


def frequency_overview(
    period: str = "always",
    year: int = 0,
    month: int = 0,
    port: int = DEFAULT_PORT,
):
    payload = {
        "request_type": "frequency",
        "period": period,
        "year": year,
        "month": month,
    }
    response, error = _send_json(port, payload)
    return _checked(response, error, "frequency")
