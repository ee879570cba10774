from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Movie booking core metrics

    Admission outcomes, booked seat volume, status recomputes and
    notification delivery failures.
    """

    def __init__(self):
        # ========== Admission ==========
        self.booking_requests = Counter(
            'movie_booking_requests_total',
            'Booking requests by admission result',
            ['result'],  # accepted/validation_error/not_found/capacity_exceeded/unavailable
        )

        self.seats_booked = Counter(
            'movie_booking_seats_booked_total',
            'Seats accepted by the admission check',
        )

        self.admission_duration = Histogram(
            'movie_booking_admission_duration_seconds',
            'Time spent holding the per-key lock for check-and-persist',
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
        )

        # ========== Status ==========
        self.status_recomputes = Counter(
            'movie_booking_status_recomputes_total',
            'Status recomputations by result',
            ['result'],  # changed/unchanged/failed
        )

        # ========== Notification ==========
        self.notification_failures = Counter(
            'movie_booking_notification_failures_total',
            'Booking events that could not be handed to the status listener',
        )

    # ========== Helper Methods ==========

    def record_booking(self, *, result: str, seats: int = 0, duration: float | None = None):
        self.booking_requests.labels(result=result).inc()
        if seats:
            self.seats_booked.inc(seats)
        if duration is not None:
            self.admission_duration.observe(duration)

    def record_status_recompute(self, *, result: str):
        self.status_recomputes.labels(result=result).inc()


# Global metrics instance
metrics = BookingMetrics()
