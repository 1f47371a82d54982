import pytz
from datetime import date, datetime

JAKARTA_TZ = pytz.timezone("Asia/Jakarta")

def get_jakarta_time():
    """
    Returns the current time in Asia/Jakarta (WIB) as a naive datetime.
    """
    return datetime.now(JAKARTA_TZ).replace(tzinfo=None)

def jakarta_today() -> date:
    return get_jakarta_time().date()
