import threading

import pytest
import zmq

import microservice_clients
from microservices.heatmap_service import handle_message


def _serve_once(reply):
    """A REP socket on a free port answering one request on a thread."""
    context = zmq.Context.instance()
    socket = context.socket(zmq.REP)
    socket.setsockopt(zmq.LINGER, 0)
    port = socket.bind_to_random_port("tcp://127.0.0.1")

    def serve_once():
        if socket.poll(timeout=5000):
            socket.send(reply(socket.recv()))

    thread = threading.Thread(target=serve_once, daemon=True)
    thread.start()
    yield port
    thread.join(timeout=6)
    socket.close()


@pytest.fixture
def service(entry_store, config_store):
    yield from _serve_once(lambda raw: handle_message(raw, entry_store, config_store))


@pytest.fixture
def garbled_service():
    yield from _serve_once(lambda raw: b"<html>not json</html>")


def test_heatmap_month_round_trip(service):
    response, error = microservice_clients.heatmap_month(2026, 2, today="2026-02-15", port=service)
    assert error is None
    assert len(response["cells"]) == 28


def test_service_errors_are_returned_as_messages(service):
    response, error = microservice_clients.frequency_overview(period="week", port=service)
    assert response is None
    assert "Invalid 'period'" in error


def test_unreachable_service_times_out(monkeypatch):
    monkeypatch.setattr(microservice_clients, "TIMEOUT_MS", 200)
    with zmq.Context.instance().socket(zmq.REP) as closed:
        port = closed.bind_to_random_port("tcp://127.0.0.1")
    response, error = microservice_clients.heatmap_month(2026, 2, port=port)
    assert response is None
    assert "Timed out" in error


def test_non_json_reply_is_returned_as_error(garbled_service):
    response, error = microservice_clients.frequency_overview(port=garbled_service)
    assert response is None
    assert "Malformed reply" in error
