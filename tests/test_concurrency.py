"""
Tests for concurrent booking of the same room.
Each thread runs in its own application context and therefore its own
SQLite connection.
"""

import threading


class TestConcurrentCreates:
    """Only one of several overlapping bookings can win."""

    def _race(self, app, room_id, ranges):
        from models.errors import DoubleBooking
        from models.reservation import create_reservation

        barrier = threading.Barrier(len(ranges))
        results = []
        lock = threading.Lock()

        def worker(start, end):
            with app.app_context():
                barrier.wait()
                try:
                    reservation = create_reservation(room_id, start, end, 'cash')
                    outcome = ('ok', reservation['id'])
                except DoubleBooking:
                    outcome = ('double_booking', None)
                with lock:
                    results.append(outcome)

        threads = [threading.Thread(target=worker, args=r) for r in ranges]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        return results

    def test_identical_ranges(self, app, rooms):
        from models.reservation import get_reservations

        results = self._race(app, rooms[101], [('2025-06-01', '2025-06-05')] * 6)

        assert len(results) == 6
        assert [kind for kind, _ in results].count('ok') == 1
        assert len(get_reservations(room_id=rooms[101])) == 1

    def test_overlapping_ranges(self, app, rooms):
        results = self._race(app, rooms[102], [
            ('2025-06-01', '2025-06-05'),
            ('2025-06-03', '2025-06-06'),
            ('2025-06-04', '2025-06-09'),
        ])

        assert [kind for kind, _ in results].count('ok') == 1

    def test_disjoint_ranges_all_succeed(self, app, rooms):
        results = self._race(app, rooms[201], [
            ('2025-06-01', '2025-06-03'),
            ('2025-06-03', '2025-06-05'),
            ('2025-06-05', '2025-06-07'),
        ])

        assert [kind for kind, _ in results].count('ok') == 3
