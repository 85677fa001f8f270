import logging

from core.services import create_events
from page_modules.event_form import previous_locations


def test_previous_locations(conn):
    create_events(conn, [{"title": "Market", "date": "2025-05-03", "location": "Ferry Building"}])
    assert previous_locations(conn) == ["Ferry Building"]


def test_location_lookup_failure_is_logged(conn, caplog):
    conn.execute("DROP TABLE events")
    conn.commit()
    with caplog.at_level(logging.WARNING, logger="page_modules.event_form"):
        assert previous_locations(conn) == []
    assert "Could not load previous event locations" in caplog.text
