"""Repository layer responsible for all database access."""

from __future__ import annotations

import json
import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from backend.domain.models import (
    BOOKING_TYPE_FULL,
    BOOKING_TYPE_ROOM,
    Booking,
    Event,
    PricingConstraints,
    Property,
)
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


_PROPERTY_COLUMNS = (
    "property_id",
    "name",
    "nightly_full",
    "nightly_room",
    "rentable_rooms",
    "pricing_constraints",
    "area",
    "address",
    "city",
    "bedrooms",
    "max_guests_full",
    "max_guests_room",
)

_BOOKING_COLUMNS = (
    "booking_id",
    "property_id",
    "check_in",
    "check_out",
    "booking_type",
    "room_number",
    "guests",
    "nightly_rate",
    "total_price",
    "guest_name",
    "guest_email",
    "created_at",
    "updated_at",
)

_EVENT_COLUMNS = (
    "event_id",
    "name",
    "event_date",
    "event_type",
    "impact",
    "distance_miles",
    "venue",
)


DEFAULT_PROPERTIES: tuple[dict[str, Any], ...] = (
    {"property_id": "river-vista-743", "name": "River Vista UNIT 743", "address": "200 River Vista Dr", "city": "Sandy Springs", "area": "sandy-springs", "bedrooms": 2, "rentable_rooms": 2, "nightly_full": 185, "nightly_room": 85, "max_guests_full": 6, "max_guests_room": 2},
    {"property_id": "roswell-510", "name": "Roswell Rd UNIT 510", "address": "3820 Roswell Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 3, "rentable_rooms": 0, "nightly_full": 225, "nightly_room": 0, "max_guests_full": 8, "max_guests_room": 0},
    {"property_id": "roswell-505", "name": "Roswell Rd UNIT 505", "address": "3235 Roswell Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 2, "rentable_rooms": 2, "nightly_full": 165, "nightly_room": 75, "max_guests_full": 4, "max_guests_room": 2},
    {"property_id": "peachtree-407", "name": "Peachtree UNIT 407", "address": "2277 Peachtree Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 3, "rentable_rooms": 3, "nightly_full": 275, "nightly_room": 95, "max_guests_full": 8, "max_guests_room": 2},
    {"property_id": "peachtree-608", "name": "Peachtree APT 608", "address": "3334 Peachtree Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 2, "rentable_rooms": 0, "nightly_full": 195, "nightly_room": 0, "max_guests_full": 4, "max_guests_room": 0},
    {"property_id": "peachtree-902", "name": "Peachtree UNIT 902", "address": "3324 Peachtree Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 2, "rentable_rooms": 2, "nightly_full": 245, "nightly_room": 110, "max_guests_full": 6, "max_guests_room": 2},
    {"property_id": "piedmont-2h", "name": "Piedmont APT 2H", "address": "3530 Piedmont Rd NE", "city": "Atlanta", "area": "midtown", "bedrooms": 2, "rentable_rooms": 0, "nightly_full": 175, "nightly_room": 0, "max_guests_full": 4, "max_guests_room": 0},
    {"property_id": "pharr-2505", "name": "Pharr Court 2505", "address": "2870 Pharr Court South NW", "city": "Atlanta", "area": "buckhead", "bedrooms": 4, "rentable_rooms": 4, "nightly_full": 325, "nightly_room": 95, "max_guests_full": 10, "max_guests_room": 2},
    {"property_id": "piedmont-5a", "name": "Piedmont APT 5A", "address": "3530 Piedmont Rd NE", "city": "Atlanta", "area": "midtown", "bedrooms": 1, "rentable_rooms": 0, "nightly_full": 155, "nightly_room": 0, "max_guests_full": 2, "max_guests_room": 0},
    {"property_id": "paces-ferry-1411", "name": "Paces Ferry APT 1411", "address": "325 E Paces Ferry Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 3, "rentable_rooms": 3, "nightly_full": 395, "nightly_room": 145, "max_guests_full": 8, "max_guests_room": 2},
    {"property_id": "oak-valley-2350", "name": "Oak Valley APT 2350", "address": "3475 Oak Valley Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 2, "rentable_rooms": 0, "nightly_full": 205, "nightly_room": 0, "max_guests_full": 4, "max_guests_room": 0},
    {"property_id": "pharr-1608", "name": "Pharr Ct 1608", "address": "2870 Pharr Ct S NW", "city": "Atlanta", "area": "buckhead", "bedrooms": 2, "rentable_rooms": 2, "nightly_full": 235, "nightly_room": 105, "max_guests_full": 6, "max_guests_room": 2},
    {"property_id": "oak-valley-910", "name": "Oak Valley APT 910", "address": "3475 Oak Valley Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 2, "rentable_rooms": 0, "nightly_full": 185, "nightly_room": 0, "max_guests_full": 4, "max_guests_room": 0},
    {"property_id": "peachtree-2807", "name": "Peachtree UNIT 2807", "address": "3324 Peachtree Rd NE", "city": "Atlanta", "area": "buckhead", "bedrooms": 4, "rentable_rooms": 4, "nightly_full": 425, "nightly_room": 125, "max_guests_full": 10, "max_guests_room": 2},
)

SAMPLE_BOOKINGS: tuple[dict[str, Any], ...] = (
    {"booking_id": 1, "guest_name": "Sarah Johnson", "guest_email": "sarah.j@email.com", "property_id": "peachtree-407", "check_in": "2025-12-18", "check_out": "2025-12-22", "guests": 2, "booking_type": BOOKING_TYPE_ROOM, "room_number": 1, "nightly_rate": 139, "total_price": 556},
    {"booking_id": 2, "guest_name": "Michael Chen", "guest_email": "mchen@business.com", "property_id": "peachtree-407", "check_in": "2025-12-20", "check_out": "2025-12-24", "guests": 1, "booking_type": BOOKING_TYPE_ROOM, "room_number": 2, "nightly_rate": 155, "total_price": 620},
    {"booking_id": 3, "guest_name": "The Williams Family", "guest_email": "williams.fam@email.com", "property_id": "pharr-2505", "check_in": "2025-12-21", "check_out": "2025-12-27", "guests": 4, "booking_type": BOOKING_TYPE_FULL, "room_number": None, "nightly_rate": 549, "total_price": 3294},
    {"booking_id": 4, "guest_name": "Emily Rodriguez", "guest_email": "emily.r@email.com", "property_id": "piedmont-5a", "check_in": "2025-12-26", "check_out": "2025-12-30", "guests": 2, "booking_type": BOOKING_TYPE_FULL, "room_number": None, "nightly_rate": 259, "total_price": 1036},
    {"booking_id": 5, "guest_name": "James & Lisa Park", "guest_email": "jpark@email.com", "property_id": "river-vista-743", "check_in": "2025-12-28", "check_out": "2026-01-02", "guests": 2, "booking_type": BOOKING_TYPE_FULL, "room_number": None, "nightly_rate": 329, "total_price": 1645},
)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def property_from_mapping(data: Mapping[str, Any]) -> Property:
    """Build a Property from a table row or an exported JSON object."""
    raw_constraints = data.get("pricing_constraints")
    if isinstance(raw_constraints, str):
        raw_constraints = json.loads(raw_constraints)
    constraints = PricingConstraints(**raw_constraints) if raw_constraints else None
    return Property(
        property_id=str(data["property_id"]),
        name=str(data["name"]),
        nightly_full=float(data["nightly_full"]),
        nightly_room=float(data.get("nightly_room") or 0.0),
        rentable_rooms=int(data.get("rentable_rooms") or 0),
        pricing_constraints=constraints,
        area=data.get("area"),
        address=data.get("address"),
        city=data.get("city"),
        bedrooms=int(data.get("bedrooms") or 0),
        max_guests_full=int(data.get("max_guests_full") or 0),
        max_guests_room=int(data.get("max_guests_room") or 0),
    )


def booking_from_mapping(data: Mapping[str, Any]) -> Booking:
    return Booking(
        booking_id=_optional_int(data.get("booking_id")),
        property_id=str(data["property_id"]),
        check_in=_parse_date(data["check_in"]),
        check_out=_parse_date(data["check_out"]),
        booking_type=str(data.get("booking_type") or BOOKING_TYPE_FULL),
        room_number=_optional_int(data.get("room_number")),
        guests=int(data.get("guests") or 1),
        nightly_rate=float(data.get("nightly_rate") or 0.0),
        total_price=float(data.get("total_price") or 0.0),
        guest_name=data.get("guest_name"),
        guest_email=data.get("guest_email"),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
    )


def event_from_mapping(data: Mapping[str, Any]) -> Event:
    return Event(
        event_id=_optional_int(data.get("event_id")),
        name=str(data["name"]),
        event_date=_parse_date(data["event_date"]),
        event_type=str(data.get("event_type") or "other"),
        impact=str(data.get("impact") or "normal"),
        distance_miles=_optional_float(data.get("distance_miles")),
        venue=data.get("venue"),
    )


class DataRepository:
    """Encapsulates SQLite access so business logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON;")
        return connection

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Properties (
                        property_id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        nightly_full REAL NOT NULL CHECK (nightly_full >= 0),
                        nightly_room REAL NOT NULL DEFAULT 0 CHECK (nightly_room >= 0),
                        rentable_rooms INTEGER NOT NULL DEFAULT 0 CHECK (rentable_rooms >= 0),
                        pricing_constraints TEXT,
                        area TEXT,
                        address TEXT,
                        city TEXT,
                        bedrooms INTEGER NOT NULL DEFAULT 0,
                        max_guests_full INTEGER NOT NULL DEFAULT 0,
                        max_guests_room INTEGER NOT NULL DEFAULT 0
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Bookings (
                        booking_id INTEGER PRIMARY KEY AUTOINCREMENT,
                        property_id TEXT NOT NULL,
                        check_in TEXT NOT NULL,
                        check_out TEXT NOT NULL,
                        booking_type TEXT NOT NULL CHECK (booking_type IN ('full', 'room')),
                        room_number INTEGER,
                        guests INTEGER NOT NULL DEFAULT 1,
                        nightly_rate REAL NOT NULL DEFAULT 0,
                        total_price REAL NOT NULL DEFAULT 0,
                        guest_name TEXT,
                        guest_email TEXT,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Events (
                        event_id INTEGER PRIMARY KEY AUTOINCREMENT,
                        name TEXT NOT NULL,
                        event_date TEXT NOT NULL,
                        event_type TEXT NOT NULL DEFAULT 'other',
                        impact TEXT NOT NULL DEFAULT 'normal',
                        distance_miles REAL,
                        venue TEXT
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Settings (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    );
                    """
                )

                cursor.execute(
                    "CREATE INDEX IF NOT EXISTS idx_properties_area ON Properties(area);"
                )
                cursor.execute(
                    "CREATE INDEX IF NOT EXISTS idx_bookings_property ON Bookings(property_id);"
                )
                cursor.execute(
                    "CREATE INDEX IF NOT EXISTS idx_bookings_check_in ON Bookings(check_in);"
                )
                cursor.execute(
                    "CREATE INDEX IF NOT EXISTS idx_events_date ON Events(event_date);"
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def seed_default_properties(self) -> int:
        """Insert the default catalogue only when no properties exist."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM Properties;")
                if int(cursor.fetchone()["count"]) > 0:
                    logger.info("Properties already present; skipping seed")
                    return 0
        except sqlite3.Error as exc:
            raise RuntimeError(f"Property seeding failed: {exc}") from exc

        for data in DEFAULT_PROPERTIES:
            self.save_property(property_from_mapping(data))
        logger.info("Property seed completed with %s records", len(DEFAULT_PROPERTIES))
        return len(DEFAULT_PROPERTIES)

    def seed_sample_bookings(self) -> list[Booking]:
        """Replace all bookings with the sample set."""
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM Bookings;")
                conn.commit()
        except sqlite3.Error as exc:
            raise RuntimeError(f"Booking seeding failed: {exc}") from exc

        saved = [self.save_booking(booking_from_mapping(data)) for data in SAMPLE_BOOKINGS]
        logger.info("Sample booking seed completed with %s records", len(saved))
        return saved

    # --- Properties ---

    def get_property(self, property_id: str) -> Optional[Property]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM Properties WHERE property_id = ?;",
                (property_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return property_from_mapping(dict(row))

    def list_properties(self) -> list[Property]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM Properties ORDER BY property_id ASC;")
            return [property_from_mapping(dict(row)) for row in cursor.fetchall()]

    def list_properties_by_area(self, area: str) -> list[Property]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM Properties WHERE area = ? ORDER BY property_id ASC;",
                (area,),
            )
            return [property_from_mapping(dict(row)) for row in cursor.fetchall()]

    def save_property(self, property_: Property) -> Property:
        """Insert or replace a property keyed by its id."""
        payload = property_.to_dict()
        payload["pricing_constraints"] = (
            json.dumps(payload["pricing_constraints"])
            if payload["pricing_constraints"] is not None
            else None
        )
        placeholders = ", ".join("?" for _ in _PROPERTY_COLUMNS)
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT OR REPLACE INTO Properties ({", ".join(_PROPERTY_COLUMNS)})
                VALUES ({placeholders});
                """,
                tuple(payload[column] for column in _PROPERTY_COLUMNS),
            )
            conn.commit()
        return property_

    def delete_property(self, property_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM Properties WHERE property_id = ?;", (property_id,))
            conn.commit()
            return cursor.rowcount > 0

    # --- Bookings ---

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM Bookings WHERE booking_id = ?;", (booking_id,))
            row = cursor.fetchone()
            if row is None:
                return None
            return booking_from_mapping(dict(row))

    def list_bookings(self) -> list[Booking]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM Bookings ORDER BY check_in ASC, booking_id ASC;")
            return [booking_from_mapping(dict(row)) for row in cursor.fetchall()]

    def list_bookings_for_property(self, property_id: str) -> list[Booking]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM Bookings
                WHERE property_id = ?
                ORDER BY check_in ASC, booking_id ASC;
                """,
                (property_id,),
            )
            return [booking_from_mapping(dict(row)) for row in cursor.fetchall()]

    def save_booking(self, booking: Booking) -> Booking:
        """Upsert a booking, stamping ``updated_at`` and keeping ``created_at``."""
        now = _utc_now_iso()
        created_at = booking.created_at
        if created_at is None and booking.booking_id is not None:
            existing = self.get_booking(booking.booking_id)
            created_at = existing.created_at if existing is not None else None

        payload = booking.to_dict()
        payload["created_at"] = created_at or now
        payload["updated_at"] = now
        columns = [
            column
            for column in _BOOKING_COLUMNS
            if column != "booking_id" or booking.booking_id is not None
        ]
        placeholders = ", ".join("?" for _ in columns)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT OR REPLACE INTO Bookings ({", ".join(columns)})
                VALUES ({placeholders});
                """,
                tuple(payload[column] for column in columns),
            )
            conn.commit()
            booking_id = booking.booking_id if booking.booking_id is not None else cursor.lastrowid

        saved = self.get_booking(int(booking_id))
        if saved is None:  # pragma: no cover - the row was just written
            raise RuntimeError(f"Booking {booking_id} could not be read back")
        return saved

    def delete_booking(self, booking_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM Bookings WHERE booking_id = ?;", (booking_id,))
            conn.commit()
            return cursor.rowcount > 0

    # --- Events ---

    def list_events(self) -> list[Event]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM Events ORDER BY event_date ASC, event_id ASC;")
            return [event_from_mapping(dict(row)) for row in cursor.fetchall()]

    def list_events_by_date(self, event_date: date) -> list[Event]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM Events WHERE event_date = ? ORDER BY event_id ASC;",
                (event_date.isoformat(),),
            )
            return [event_from_mapping(dict(row)) for row in cursor.fetchall()]

    def list_events_between(self, start_date: date, end_date: date) -> list[Event]:
        """Return events on ``[start_date, end_date)``."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM Events
                WHERE event_date >= ? AND event_date < ?
                ORDER BY event_date ASC, event_id ASC;
                """,
                (start_date.isoformat(), end_date.isoformat()),
            )
            return [event_from_mapping(dict(row)) for row in cursor.fetchall()]

    def list_events_through(self, first_date: date, last_date: date) -> list[Event]:
        """Return events on ``[first_date, last_date]``."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM Events
                WHERE event_date >= ? AND event_date <= ?
                ORDER BY event_date ASC, event_id ASC;
                """,
                (first_date.isoformat(), last_date.isoformat()),
            )
            return [event_from_mapping(dict(row)) for row in cursor.fetchall()]

    def save_event(self, event: Event) -> Event:
        payload = event.to_dict()
        columns = [
            column
            for column in _EVENT_COLUMNS
            if column != "event_id" or event.event_id is not None
        ]
        placeholders = ", ".join("?" for _ in columns)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT OR REPLACE INTO Events ({", ".join(columns)})
                VALUES ({placeholders});
                """,
                tuple(payload[column] for column in columns),
            )
            conn.commit()
            event_id = event.event_id if event.event_id is not None else cursor.lastrowid
        return Event(
            event_id=int(event_id),
            name=event.name,
            event_date=event.event_date,
            event_type=event.event_type,
            impact=event.impact,
            distance_miles=event.distance_miles,
            venue=event.venue,
        )

    def delete_event(self, event_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM Events WHERE event_id = ?;", (event_id,))
            conn.commit()
            return cursor.rowcount > 0

    # --- Settings ---

    def get_setting(self, key: str) -> Any:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM Settings WHERE key = ?;", (key,))
            row = cursor.fetchone()
            if row is None:
                return None
            return json.loads(row["value"])

    def set_setting(self, key: str, value: Any) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO Settings (key, value) VALUES (?, ?);",
                (key, json.dumps(value)),
            )
            conn.commit()

    # --- Maintenance ---

    def clear_all(self) -> None:
        with self._connect() as conn:
            for table in ("Bookings", "Events", "Properties", "Settings"):
                conn.execute(f"DELETE FROM {table};")
            conn.commit()
        logger.info("All tables cleared at %s", self._db_path)

    def export_data(self) -> str:
        """Serialize properties, bookings and events to a JSON document."""
        data = {
            "properties": [item.to_dict() for item in self.list_properties()],
            "bookings": [item.to_dict() for item in self.list_bookings()],
            "events": [item.to_dict() for item in self.list_events()],
            "exported_at": _utc_now_iso(),
        }
        return json.dumps(data, indent=2)

    def import_data(self, payload: str) -> dict[str, int]:
        """
        Replace each collection present in an exported JSON document.

        Every item is parsed before any table is touched, and the deletes and
        inserts share one transaction, so a bad document leaves the data as it was.
        """
        data = json.loads(payload)
        parsers: Iterable[tuple[str, str, Any]] = (
            ("properties", "Properties", property_from_mapping),
            ("bookings", "Bookings", booking_from_mapping),
            ("events", "Events", event_from_mapping),
        )
        parsed: list[tuple[str, str, list[Any]]] = [
            (key, table, [parse(item) for item in data[key]])
            for key, table, parse in parsers
            if key in data
        ]

        now = _utc_now_iso()
        counts: dict[str, int] = {}
        with self._connect() as conn:
            for key, table, items in parsed:
                conn.execute(f"DELETE FROM {table};")
                for item in items:
                    columns, values = _row_for(item, now)
                    conn.execute(
                        f"""
                        INSERT OR REPLACE INTO {table} ({", ".join(columns)})
                        VALUES ({", ".join("?" for _ in columns)});
                        """,
                        values,
                    )
                counts[key] = len(items)
            conn.commit()
        logger.info("Data import completed | counts=%s", counts)
        return counts


def _row_for(item: Property | Booking | Event, now: str) -> tuple[list[str], tuple[Any, ...]]:
    """Column names and values used to insert an imported record."""
    payload = item.to_dict()
    if isinstance(item, Property):
        if payload["pricing_constraints"] is not None:
            payload["pricing_constraints"] = json.dumps(payload["pricing_constraints"])
        columns = list(_PROPERTY_COLUMNS)
    elif isinstance(item, Booking):
        payload["created_at"] = item.created_at or now
        payload["updated_at"] = item.updated_at or now
        columns = [
            column
            for column in _BOOKING_COLUMNS
            if column != "booking_id" or item.booking_id is not None
        ]
    else:
        columns = [
            column
            for column in _EVENT_COLUMNS
            if column != "event_id" or item.event_id is not None
        ]
    return columns, tuple(payload[column] for column in columns)
