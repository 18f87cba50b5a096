# src/cli.py
from __future__ import annotations

import os
import sys
import json
import logging
import argparse
import traceback

# Ensure our package is importable regardless of CWD
sys.path.insert(0, os.path.dirname(__file__))

# ---------------------------
# Commands
# ---------------------------

def _provider():
    from eventhub.db.mongo import MongoProvider
    return MongoProvider.from_config()


def _dump(obj) -> None:
    from eventhub.utils.documents import jsonable
    print(json.dumps(jsonable(obj), indent=2))


def cmd_serve(port: int, host: str, debug: bool):
    from eventhub import create_app
    app = create_app()
    app.run(host=host, port=port, debug=debug)


def cmd_db_ping() -> None:
    ok = _provider().ping()
    print("mongo ping:", "ok" if ok else "failed")
    if not ok:
        raise SystemExit(2)


def cmd_db_indexes() -> None:
    from eventhub.db.mongo import ensure_indexes
    ensure_indexes(_provider().get_db())
    print("indexes ensured")


def cmd_events_load(path: str) -> None:
    """
    Load events from a JSON file (one object or a list). Each one is
    normalized and validated before it is written; the first invalid
    event stops the load.
    """
    from eventhub.store.events import save_event

    with open(path, encoding="utf-8") as fh:
        payload = json.load(fh)
    items = payload if isinstance(payload, list) else [payload]

    db = _provider().get_db()
    for i, fields in enumerate(items):
        doc = save_event(db, fields)
        print(f"[{i}] saved {doc['slug']} ({doc['_id']})")
    print(f"Saved {len(items)} events")


def cmd_events_show(slug: str) -> None:
    from eventhub.store.events import find_event_by_slug
    ev = find_event_by_slug(_provider().get_db(), slug)
    if ev is None:
        raise SystemExit(f"no event with slug '{slug}'")
    _dump(ev)


def cmd_events_similar(slug: str) -> None:
    from eventhub.store.events import find_similar_events_by_slug
    rows = find_similar_events_by_slug(_provider().get_db(), slug)
    _dump([{"slug": r["slug"], "tags": r.get("tags", [])} for r in rows])


def cmd_booking_add(event_id: str, email: str) -> None:
    from eventhub.store.bookings import create_booking
    doc = create_booking(_provider().get_db(), {"event_id": event_id, "email": email})
    print(f"booking {doc['_id']} created for {doc['email']}")


def cmd_booking_list(slug: str) -> None:
    from eventhub.store.bookings import bookings_for_event
    from eventhub.store.events import find_event_by_slug
    db = _provider().get_db()
    ev = find_event_by_slug(db, slug)
    if ev is None:
        raise SystemExit(f"no event with slug '{slug}'")
    _dump(bookings_for_event(db, ev["_id"]))


# ---------------------------
# Parser / main
# ---------------------------

def main():
    from eventhub import config
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    p = argparse.ArgumentParser(description="Eventhub CLI")
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
    sci = sc_sub.add_parser("indexes", help="Create event/booking indexes")
    sci.set_defaults(func=lambda a: cmd_db_indexes())

    # events
    ev = sub.add_parser("events", help="Event records")
    ev_sub = ev.add_subparsers(dest="evcmd", required=True)
    evl = ev_sub.add_parser("load", help="Normalize and save events from a JSON file")
    evl.add_argument("path")
    evl.set_defaults(func=lambda a: cmd_events_load(a.path))
    evs = ev_sub.add_parser("show", help="Print one event by slug")
    evs.add_argument("slug")
    evs.set_defaults(func=lambda a: cmd_events_show(a.slug))
    evm = ev_sub.add_parser("similar", help="List events sharing a tag with SLUG")
    evm.add_argument("slug")
    evm.set_defaults(func=lambda a: cmd_events_similar(a.slug))

    # booking
    bk = sub.add_parser("booking", help="Bookings")
    bk_sub = bk.add_subparsers(dest="bkcmd", required=True)
    bka = bk_sub.add_parser("add", help="Book EMAIL onto the event with EVENT_ID")
    bka.add_argument("event_id")
    bka.add_argument("email")
    bka.set_defaults(func=lambda a: cmd_booking_add(a.event_id, a.email))
    bkl = bk_sub.add_parser("list", help="List bookings for an event slug")
    bkl.add_argument("slug")
    bkl.set_defaults(func=lambda a: cmd_booking_list(a.slug))

    args = p.parse_args()
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
