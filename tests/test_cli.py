import json

import pytest

from devevents.cli import main
from devevents.repositories.bookings import create_booking
from devevents.repositories.events import create_event

from fixtures import event_payload


def test_events_list_and_show(connection, capsys):
    create_event(event_payload())
    main(["events", "list"])
    out = capsys.readouterr().out
    assert "go-systems-summit" in out
    assert "1 event(s)" in out

    main(["events", "show", "go-systems-summit"])
    body = json.loads(capsys.readouterr().out)
    assert body["event"]["title"] == "Go Systems Summit"


def test_events_show_missing(connection, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["events", "show", "ghost"])
    assert exc.value.code == 1


def test_bookings_count(connection, capsys):
    create_event(event_payload())
    create_booking("go-systems-summit", "a@b.com")
    main(["bookings", "count", "go-systems-summit"])
    assert capsys.readouterr().out.strip() == "1"


def test_secret_gen_key(capsys):
    main(["secret", "gen-key"])
    assert len(capsys.readouterr().out.strip()) == 64
