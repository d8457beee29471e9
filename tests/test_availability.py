"""
Tests for room availability, conflict detection and pricing.
"""

import random
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from models.errors import (
    DoubleBooking, InvalidRange, InvalidStay, RoomNotFound, ValidationError
)


def _book(room_id, start, end, method='cash', **kwargs):
    from models.reservation import create_reservation
    return create_reservation(room_id, start, end, method, **kwargs)


class TestNormalizeRange:
    """Parsing and ordering of stay ranges."""

    def test_date_only_values(self, app):
        from models.reservation import normalize_range

        start, end = normalize_range('2025-06-01', '2025-06-05')
        assert start == datetime(2025, 6, 1)
        assert end == datetime(2025, 6, 5)

    def test_utc_suffix_is_converted_to_naive(self, app):
        from models.reservation import normalize_range

        start, end = normalize_range('2025-06-01T12:00:00Z', '2025-06-02T06:00:00-06:00')
        assert start == datetime(2025, 6, 1, 12)
        assert end == datetime(2025, 6, 2, 12)
        assert start.tzinfo is None

    def test_start_equal_to_end_rejected(self, app):
        from models.reservation import normalize_range

        with pytest.raises(InvalidRange):
            normalize_range('2025-06-01', '2025-06-01')

    def test_start_after_end_rejected(self, app):
        from models.reservation import normalize_range

        with pytest.raises(InvalidRange):
            normalize_range('2025-06-05', '2025-06-01')

    def test_unparseable_date(self, app):
        from models.reservation import normalize_range

        with pytest.raises(ValidationError):
            normalize_range('mañana', '2025-06-01')


class TestHasConflict:
    """Half-open overlap rule against active reservations."""

    def test_empty_room_has_no_conflict(self, app, rooms):
        from models.reservation import has_conflict

        assert has_conflict(rooms[101], '2025-06-01', '2025-06-05') is False

    def test_overlap_detected(self, app, rooms):
        from models.reservation import has_conflict

        _book(rooms[101], '2025-06-01', '2025-06-05')

        assert has_conflict(rooms[101], '2025-06-03', '2025-06-06') is True
        assert has_conflict(rooms[101], '2025-05-30', '2025-06-02') is True
        assert has_conflict(rooms[101], '2025-06-02', '2025-06-03T12:00:00') is True

    def test_back_to_back_is_not_a_conflict(self, app, rooms):
        from models.reservation import has_conflict

        _book(rooms[101], '2025-06-01', '2025-06-05')

        assert has_conflict(rooms[101], '2025-06-05', '2025-06-08') is False
        assert has_conflict(rooms[101], '2025-05-28', '2025-06-01') is False

    def test_other_room_is_independent(self, app, rooms):
        from models.reservation import has_conflict

        _book(rooms[101], '2025-06-01', '2025-06-05')

        assert has_conflict(rooms[102], '2025-06-01', '2025-06-05') is False

    def test_cancelled_reservation_does_not_block(self, app, rooms):
        from models.reservation import has_conflict, cancel_reservation

        reservation = _book(rooms[101], '2025-06-01', '2025-06-05')
        cancel_reservation(reservation['id'])

        assert has_conflict(rooms[101], '2025-06-01', '2025-06-05') is False

    def test_confirmed_reservation_blocks(self, app, rooms):
        from models.reservation import has_conflict, update_reservation

        reservation = _book(rooms[101], '2025-06-01', '2025-06-05')
        update_reservation(reservation['id'], {'status': 'confirmed'})

        assert has_conflict(rooms[101], '2025-06-02', '2025-06-03') is True

    def test_exclude_own_reservation(self, app, rooms):
        from models.reservation import has_conflict

        reservation = _book(rooms[101], '2025-06-01', '2025-06-05')

        assert has_conflict(rooms[101], '2025-06-02', '2025-06-06',
                            exclude_reservation_id=reservation['id']) is False

    def test_invalid_range_raises(self, app, rooms):
        from models.reservation import has_conflict

        with pytest.raises(InvalidRange):
            has_conflict(rooms[101], '2025-06-05', '2025-06-01')


class TestComputePrice:
    """Nightly pricing."""

    def test_three_nights(self, app, rooms):
        from models.reservation import compute_price

        assert compute_price(rooms[101], '2025-06-01', '2025-06-04') == Decimal('1500.00')

    def test_partial_day_rounds_up(self, app, rooms):
        from models.reservation import compute_price

        price = compute_price(rooms[101], '2025-06-01T15:00:00', '2025-06-03T12:00:00')
        assert price == Decimal('1000.00')

    def test_shorter_than_a_day_is_invalid(self, app, rooms):
        from models.reservation import compute_price

        with pytest.raises(InvalidStay):
            compute_price(rooms[101], '2025-06-01T14:00:00', '2025-06-02T10:00:00')

    def test_fractional_rate_rounds_half_up(self, app):
        from models.reservation import compute_price
        from models.room import create_room

        room_id = create_room(301, 'Económica', '333.335')
        assert compute_price(room_id, '2025-06-01', '2025-06-02') == Decimal('333.34')

    def test_unknown_room(self, app):
        from models.reservation import compute_price

        with pytest.raises(RoomNotFound):
            compute_price(9999, '2025-06-01', '2025-06-04')


class TestAvailableRooms:
    """Room search by window."""

    def test_booked_room_excluded(self, app, rooms):
        from models.reservation import get_available_rooms

        _book(rooms[102], '2025-07-10', '2025-07-15')

        available = get_available_rooms('2025-07-12', '2025-07-13')
        numbers = [room['number'] for room in available]
        assert numbers == [101, 201]
        assert all('images' in room for room in available)

    def test_adjacent_window_includes_room(self, app, rooms):
        from models.reservation import get_available_rooms

        _book(rooms[102], '2025-07-10', '2025-07-15')

        numbers = [room['number'] for room in get_available_rooms('2025-07-15', '2025-07-18')]
        assert 102 in numbers

    def test_endpoint(self, client, rooms):
        _book(rooms[101], '2025-07-10', '2025-07-15')

        response = client.get('/api/rooms/available?start_date=2025-07-11&end_date=2025-07-12')
        assert response.status_code == 200
        numbers = [room['number'] for room in response.get_json()['data']]
        assert numbers == [102, 201]

    def test_endpoint_requires_dates(self, client, rooms):
        response = client.get('/api/rooms/available?start_date=2025-07-11')
        assert response.status_code == 400
        assert response.get_json()['success'] is False


class TestQuote:
    """Availability check with price quote."""

    def test_quote_free_room(self, client, rooms):
        response = client.post('/api/reservations/check', json={
            'room_id': rooms[102],
            'start_date': '2025-08-01',
            'end_date': '2025-08-03'
        })
        data = response.get_json()['data']
        assert response.status_code == 200
        assert data['available'] is True
        assert data['nights'] == 2
        assert data['total_price'] == 1500.0

    def test_quote_lists_conflicts(self, client, rooms):
        existing = _book(rooms[102], '2025-08-02', '2025-08-04')

        response = client.post('/api/reservations/check', json={
            'room_id': rooms[102],
            'start_date': '2025-08-01',
            'end_date': '2025-08-03'
        })
        data = response.get_json()['data']
        assert data['available'] is False
        assert data['conflicts'] == [existing['id']]


class TestRandomizedNoOverlap:
    """Whatever sequence of writes is attempted, active bookings never overlap."""

    def test_random_creates_and_updates(self, app, rooms):
        from models.reservation import (
            create_reservation, update_reservation, get_reservations
        )
        from models.errors import BookingError

        rng = random.Random(20240601)
        base = datetime(2025, 1, 1)
        room_ids = list(rooms.values())
        created = []

        for _ in range(150):
            start = base + timedelta(days=rng.randint(0, 60), hours=rng.choice([0, 12]))
            end = start + timedelta(days=rng.randint(1, 6))
            try:
                if created and rng.random() < 0.4:
                    target = rng.choice(created)
                    changes = rng.choice([
                        {'start_date': start.isoformat(), 'end_date': end.isoformat()},
                        {'room_id': rng.choice(room_ids)},
                        {'status': rng.choice(['confirmed', 'cancelled'])},
                    ])
                    update_reservation(target, changes)
                else:
                    reservation = create_reservation(
                        rng.choice(room_ids), start.isoformat(), end.isoformat(), 'cash'
                    )
                    created.append(reservation['id'])
            except BookingError:
                pass

        active = [r for r in get_reservations() if r['status'] in ('pending', 'confirmed')]
        assert active

        by_room = {}
        for reservation in active:
            by_room.setdefault(reservation['room_id'], []).append(reservation)

        for bookings in by_room.values():
            bookings.sort(key=lambda r: r['start_date'])
            for previous, current in zip(bookings, bookings[1:]):
                assert previous['end_date'] <= current['start_date']


class TestStoreLevelGuard:
    """Overlap triggers reject writes that skip the model layer."""

    def test_raw_insert_rejected(self, app, rooms):
        import sqlite3
        from database import get_db

        _book(rooms[101], '2025-06-01', '2025-06-05')

        db = get_db()
        with pytest.raises(sqlite3.IntegrityError, match='double_booking'):
            db.execute('''
                INSERT INTO reservations (room_id, start_date, end_date, status, total_price, payment_method)
                VALUES (?, '2025-06-03 00:00:00', '2025-06-06 00:00:00', 'pending', 0, 'cash')
            ''', (rooms[101],))
        db.rollback()

    def test_model_translates_trigger_error(self, app, rooms, monkeypatch):
        from models import reservation_crud

        _book(rooms[101], '2025-06-01', '2025-06-05')

        # Skip the read-side check so only the trigger can catch the overlap
        monkeypatch.setattr(reservation_crud, 'get_conflicting_reservations', lambda *a, **k: [])

        with pytest.raises(DoubleBooking):
            _book(rooms[101], '2025-06-03', '2025-06-06')
