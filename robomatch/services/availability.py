# robomatch/services/availability.py
"""Weekday-only availability ranges for technicians.

A technician picks a start and an end day; weekends are never selectable,
so the stored period lists only the Monday-Friday dates in between.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from flask import current_app

from ..extensions import db
from ..exceptions import Forbidden, NotFound, ValidationError
from ..models.availability import AvailabilityPeriod


@dataclass(frozen=True)
class WeekdayRange:
    start_date: date
    end_date: date
    selected_weekdays: tuple

    @property
    def count_weekdays(self) -> int:
        return len(self.selected_weekdays)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def normalize_range(start: date, end: date) -> WeekdayRange:
    """Order the bounds and keep only the weekdays between them (inclusive)."""
    if start > end:
        start, end = end, start
    days = []
    cur = start
    while cur <= end:
        if not is_weekend(cur):
            days.append(cur)
        cur += timedelta(days=1)
    return WeekdayRange(start_date=start, end_date=end, selected_weekdays=tuple(days))


def local_today() -> date:
    tz = ZoneInfo(current_app.config.get("AVAILABILITY_TIMEZONE", "Europe/Paris"))
    return datetime.now(tz).date()


def save_period(user_id: int, start: date, end: date, today: Optional[date] = None) -> AvailabilityPeriod:
    today = today or local_today()
    max_weekdays = current_app.config.get("AVAILABILITY_MAX_WEEKDAYS", 30)

    for label, day in (("start_date", start), ("end_date", end)):
        if is_weekend(day):
            raise ValidationError("Weekends are not available.", fields={label: day.isoformat()})

    rng = normalize_range(start, end)
    if rng.start_date < today:
        raise ValidationError("This date is not available.", fields={"start_date": rng.start_date.isoformat()})
    if not rng.count_weekdays:
        raise ValidationError("Pick at least one working day.")
    if rng.count_weekdays > max_weekdays:
        raise ValidationError(
            f"At most {max_weekdays} working days per period.",
            fields={"count_weekdays": rng.count_weekdays},
        )

    period = AvailabilityPeriod(
        user_id=user_id,
        start_date=rng.start_date,
        end_date=rng.end_date,
        selected_weekdays=[d.isoformat() for d in rng.selected_weekdays],
        weekend_excluded=True,
        count_weekdays=rng.count_weekdays,
    )
    db.session.add(period)
    db.session.commit()
    return period


def periods_for(user_id: int, upcoming_only: bool = False) -> list[AvailabilityPeriod]:
    qry = AvailabilityPeriod.query.filter_by(user_id=user_id)
    if upcoming_only:
        qry = qry.filter(AvailabilityPeriod.end_date >= local_today())
    return qry.order_by(AvailabilityPeriod.start_date.asc(), AvailabilityPeriod.id.asc()).all()


def delete_period(user_id: int, period_id: int) -> None:
    period = db.session.get(AvailabilityPeriod, period_id)
    if period is None:
        raise NotFound("Availability period not found.", period_id=period_id)
    if period.user_id != user_id:
        raise Forbidden("Not your availability period.")
    db.session.delete(period)
    db.session.commit()
