from datetime import date
from dateutil.relativedelta import relativedelta


def first_day_of_next_month(today: date | None = None) -> date:
    """Rent due date for a fresh assignment: the 1st of the following month"""
    today = today or date.today()
    return today.replace(day=1) + relativedelta(months=1)


def add_months(start: date, months: int) -> date:
    """Calendar-month arithmetic; clamps to month end (Jan 31 + 1 -> Feb 28/29)"""
    return start + relativedelta(months=months)
