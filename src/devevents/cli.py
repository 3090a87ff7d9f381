# devevents/cli.py
from __future__ import annotations

import os
import json
import argparse
import traceback

# ---------------------------
# Commands
# ---------------------------

def cmd_serve(port: int, host: str, debug: bool):
    from devevents import config, create_app
    from devevents.logging_config import setup_logging
    setup_logging("DEBUG" if debug else config.LOG_LEVEL)
    app = create_app()
    app.run(host=host, port=port, debug=debug)


def cmd_db_ping() -> None:
    from devevents.db.mongo import ping
    ok = ping()
    print("mongo ping:", "ok" if ok else "failed")
    if not ok:
        raise SystemExit(2)


def cmd_db_ensure_indexes() -> None:
    from devevents.db.mongo import ensure_indexes, get_db
    ensure_indexes(get_db())
    print("indexes ensured")


def cmd_events_list() -> None:
    from devevents.repositories.events import get_all_events
    events = get_all_events()
    for ev in events:
        print(f"{ev['slug']:40s} {ev.get('date', ''):10s} {ev.get('mode', ''):8s} {ev.get('title', '')}")
    print(f"{len(events)} event(s)")


def cmd_events_show(slug: str) -> None:
    from devevents.repositories.events import get_event_by_slug
    from devevents.serialization import serialize
    ev = get_event_by_slug(slug)
    if ev is None:
        print(json.dumps({"ok": False, "error": "EVENT_NOT_FOUND", "slug": slug}))
        raise SystemExit(1)
    print(json.dumps({"ok": True, "event": serialize(ev)}, indent=2))


def cmd_bookings_count(slug: str) -> None:
    from devevents.repositories.bookings import get_bookings_count
    print(get_bookings_count(slug))


def cmd_secret_gen_key() -> None:
    from devevents.auth import generate_api_secret
    print(generate_api_secret())


# ---------------------------
# Parser / main
# ---------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="DevEvents CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    # serve
    sp = sub.add_parser("serve", help="Run Flask server")
    sp.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    sp.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    sp.add_argument("--debug", action="store_true")
    sp.set_defaults(func=lambda a: cmd_serve(a.port, a.host, a.debug))

    # db
    sc = sub.add_parser("db", help="Database utilities")
    sc_sub = sc.add_subparsers(dest="dbcmd", required=True)
    scp = sc_sub.add_parser("ping", help="Ping MongoDB")
    scp.set_defaults(func=lambda a: cmd_db_ping())
    sci = sc_sub.add_parser("ensure-indexes", help="Create event/booking indexes")
    sci.set_defaults(func=lambda a: cmd_db_ensure_indexes())

    # events
    ev = sub.add_parser("events", help="Inspect events")
    ev_sub = ev.add_subparsers(dest="evcmd", required=True)
    evl = ev_sub.add_parser("list", help="List events, newest first")
    evl.set_defaults(func=lambda a: cmd_events_list())
    evs = ev_sub.add_parser("show", help="Print one event as JSON")
    evs.add_argument("slug")
    evs.set_defaults(func=lambda a: cmd_events_show(a.slug))

    # bookings
    bk = sub.add_parser("bookings", help="Inspect bookings")
    bk_sub = bk.add_subparsers(dest="bkcmd", required=True)
    bkc = bk_sub.add_parser("count", help="Number of bookings for an event")
    bkc.add_argument("slug")
    bkc.set_defaults(func=lambda a: cmd_bookings_count(a.slug))

    # secret
    ss = sub.add_parser("secret", help="Admin API secret helpers")
    ss_sub = ss.add_subparsers(dest="action", required=True)
    gk = ss_sub.add_parser("gen-key", help="Generate a value for API_SECRET_KEY")
    gk.set_defaults(func=lambda a: cmd_secret_gen_key())

    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except SystemExit:
        raise
    except Exception as e:
        # Surface trace on CLI errors
        print("ERROR:", e)
        traceback.print_exc()
        raise SystemExit(1)


if __name__ == "__main__":
    main()
