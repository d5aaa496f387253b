# tests/test_redis_client.py
import json

import redis

from mindcare.services import redis_client


class RecordingRedis:
    def __init__(self, fail=False):
        self.fail = fail
        self.published = []

    def publish(self, channel, message):
        if self.fail:
            raise redis.ConnectionError("connection refused")
        self.published.append((channel, message))


def test_publish_disabled_without_redis(monkeypatch):
    monkeypatch.setattr(redis_client, "r", None)
    assert redis_client.publish_event("appointment.created", {"appointmentId": "a1"}) is False


def test_publish_sends_event_envelope(monkeypatch):
    fake = RecordingRedis()
    monkeypatch.setattr(redis_client, "r", fake)

    assert redis_client.publish_event("appointment.confirmed", {"appointmentId": "a1"}) is True

    [(channel, message)] = fake.published
    assert channel == "mindcare:events"
    assert json.loads(message) == {"event": "appointment.confirmed", "appointmentId": "a1"}


def test_publish_failure_is_reported_not_raised(monkeypatch):
    monkeypatch.setattr(redis_client, "r", RecordingRedis(fail=True))
    assert redis_client.publish_event("appointment.cancelled") is False
