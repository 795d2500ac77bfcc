#!/usr/bin/env python3
"""Microservice answering calendar heatmap and frequency requests from the local journal."""

import json
import logging
import sys
from datetime import date

import zmq

from config_store import ConfigStore, active_boolean_habit_count
from entry_store import EntryStore
from frequency import PERIODS, frequency_counts
from heatmap import FILTER_KINDS, HeatmapFilter, cell_style, month_grid, today_string
from logger import LOG_FORMAT
from repo_json import JSONStore
from settings import load_settings

logger = logging.getLogger(__name__)


# =========================
# Request / response helpers
# =========================

def make_error_response(message):
    return {"status": "error", "error": message}


def serialize_response(response):
    return json.dumps(response).encode("utf-8")


def parse_request_bytes(raw_bytes):
    """Returns (request, error_response_or_None)."""
    try:
        request = json.loads(raw_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None, make_error_response("Invalid JSON in request body.")
    if not isinstance(request, dict):
        return None, make_error_response("Request body must be a JSON object.")
    return request, None


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _year_month(request):
    year = request.get("year")
    month = request.get("month")
    if not _is_int(year) or not _is_int(month) or not 1 <= year <= 9999 or not 1 <= month <= 12:
        return None, None, make_error_response(
            "'year' (1-9999) and 'month' (1-12) must be integers."
        )
    return year, month, None


def _parse_today(raw):
    if raw is None:
        return today_string(), None
    try:
        valid = isinstance(raw, str) and date.fromisoformat(raw).isoformat() == raw
    except ValueError:
        valid = False
    if not valid:
        return None, make_error_response("'today' must be a YYYY-MM-DD date string.")
    return raw, None


def _parse_filter(raw):
    if raw is None:
        return None, None
    if not isinstance(raw, dict) or raw.get("kind") not in FILTER_KINDS or not isinstance(raw.get("id"), str):
        return None, make_error_response(
            f"'filter' must be an object with 'kind' in {list(FILTER_KINDS)} and a string 'id'."
        )
    return HeatmapFilter(raw["kind"], raw["id"]), None


# =========================
# Handlers
# =========================

def handle_heatmap_month(request, entry_store, config_store):
    year, month, error = _year_month(request)
    if error:
        return error
    flt, error = _parse_filter(request.get("filter"))
    if error:
        return error
    today, error = _parse_today(request.get("today"))
    if error:
        return error
    is_dark = request.get("is_dark") is True

    count = active_boolean_habit_count(config_store.get_configs())
    entries = {e.date: e for e in entry_store.get_all_entries()}
    cells = []
    for week in month_grid(year, month):
        for day in week:
            if day is None:
                continue
            style = cell_style(day, entries.get(day), today, is_dark, count, flt)
            cells.append({
                "date": day,
                "color": style.color.css() if style.color else None,
                "hex": style.color.to_hex() if style.color else None,
                "opacity": style.opacity,
                "clickable": style.clickable,
            })
    return {"status": "ok", "year": year, "month": month, "cells": cells}


def handle_frequency(request, entry_store, config_store):
    period = request.get("period", "always")
    if period not in PERIODS:
        return make_error_response(f"Invalid 'period'. Expected one of {list(PERIODS)}.")
    year, month = request.get("year", 0), request.get("month", 0)
    if period == "month":
        year, month, error = _year_month(request)
        if error:
            return error
    items = frequency_counts(
        entry_store.get_all_entries(),
        config_store.get_configs(),
        period,
        year,
        month,
        date.today(),
    )
    return {
        "status": "ok",
        "period": period,
        "items": [{"id": i.id, "label": i.label, "type": i.type, "count": i.count} for i in items],
    }


HANDLERS = {
    "heatmap_month": handle_heatmap_month,
    "frequency": handle_frequency,
}


def handle_message(raw_bytes, entry_store, config_store):
    """
    Pure handler apart from store reads: bytes in, bytes out.
    """
    request, parse_error = parse_request_bytes(raw_bytes)
    if parse_error is not None:
        return serialize_response(parse_error)

    handler = HANDLERS.get(request.get("request_type"))
    if handler is None:
        return serialize_response(make_error_response(
            f"Unsupported request_type. Expected one of {sorted(HANDLERS)}."
        ))
    return serialize_response(handler(request, entry_store, config_store))


# =========================
# ZeroMQ server
# =========================

def create_socket(port):
    context = zmq.Context()
    socket = context.socket(zmq.REP)
    socket.bind(f"tcp://*:{port}")
    return context, socket


def run_server(port, data_dir):
    store = JSONStore(data_dir)
    entry_store = EntryStore(store)
    config_store = ConfigStore(store)
    context, socket = create_socket(port)
    logger.info("Heatmap service listening on port %s (data in %s)", port, data_dir)

    try:
        while True:
            raw_request = socket.recv()
            try:
                response_bytes = handle_message(raw_request, entry_store, config_store)
            except Exception as exc:
                logger.exception("Heatmap request failed")
                response_bytes = serialize_response(make_error_response(f"Internal error: {exc}"))
            socket.send(response_bytes)
    except KeyboardInterrupt:
        logger.info("Heatmap service interrupted via keyboard.")
    finally:
        socket.close()
        context.term()


def main():
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, stream=sys.stderr, format=LOG_FORMAT)
    run_server(settings.heatmap_port, settings.data_dir)


if __name__ == "__main__":
    main()
