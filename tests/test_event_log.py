from __future__ import annotations

from franchise_simulator.services.event_log import (
    EventLog,
    EventPayload,
    EventType,
    SimulationHistoryEntry,
)


def test_keeps_only_latest_events():
    log = EventLog(event_limit=3, history_limit=2)

    for source in ("a", "b", "c", "d", "e"):
        log.record_event(EventType.UTM_CAPTURED, EventPayload(params={"utm_source": source}))

    assert [e.payload.params["utm_source"] for e in log.events()] == ["c", "d", "e"]


def test_history_entry_records_event():
    log = EventLog(event_limit=10, history_limit=2)

    for source in ("google", "instagram", "facebook"):
        log.save_simulation_history(SimulationHistoryEntry(utm_params={"utm_source": source}))

    assert [h.utm_params["utm_source"] for h in log.history()] == ["instagram", "facebook"]
    events = log.events()
    assert len(events) == 3
    assert all(e.type is EventType.SIMULATION_HISTORY_SAVED for e in events)
    assert events[-1].payload.params == {"utm_source": "facebook"}


def test_attribution_with_utm_params():
    log = EventLog()

    event = log.record_attribution({"utm_source": "google"}, "https://example.com/?utm_source=google")

    assert event.type is EventType.UTM_CAPTURED
    assert event.payload.params == {"utm_source": "google"}
    assert event.payload.url == "https://example.com/?utm_source=google"


def test_attribution_without_utm_params():
    log = EventLog()

    event = log.record_attribution({})

    assert event.type is EventType.UTM_MISSING
    assert event.payload == EventPayload(context="submission")
    assert log.events() == [event]


def test_event_ids_are_prefixed_by_type():
    log = EventLog()

    event = log.record_event(EventType.UTM_MISSING)

    assert event.id.startswith("utmMissing-")
    assert event.payload == EventPayload()


def test_clear():
    log = EventLog()
    log.save_simulation_history(SimulationHistoryEntry())

    log.clear()

    assert log.events() == []
    assert log.history() == []
