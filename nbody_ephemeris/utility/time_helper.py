"""
Time Utilities
==============

Utility functions for time parsing, formatting and Julian date conversion.
Julian dates are in the TDB scale.
"""
from datetime     import datetime
from astropy.time import Time


def format_time_offset(
  days : float,
) -> str:
  """
  Format a time offset in days as a human-readable string.

  Examples:
    1.5      -> "+1d 12h 00m 00.000s"
   -0.25     -> "-0d 06h 00m 00.000s"
  
  Input:
  ------
    days : float
      Time offset in days (can be positive or negative).
  
  Output:
  -------
    str
      Formatted string like "+36525d 00h 00m 00.000s"
  """
  sign    = '+' if days >= 0 else '-'
  abs_sec = abs(days) * 86400.0
  
  whole_days = int(abs_sec // 86400)
  hours      = int((abs_sec % 86400) // 3600)
  minutes    = int((abs_sec % 3600) // 60)
  secs       = abs_sec % 60
  
  return f"{sign}{whole_days}d {hours:02d}h {minutes:02d}m {secs:06.3f}s"


def jd_to_datetime(
  jd : float,
) -> datetime:
  """
  Convert a Julian date (TDB) to a calendar datetime (TDB).
  
  Input:
  ------
    jd : float
      Julian date [d].
  
  Output:
  -------
    datetime
      Calendar date and time.
  """
  return Time(jd, format='jd', scale='tdb').to_datetime()


def datetime_to_jd(
  time_dt : datetime,
) -> float:
  """
  Convert a calendar datetime (TDB) to a Julian date (TDB).
  
  Input:
  ------
    time_dt : datetime
      Calendar date and time.
  
  Output:
  -------
    float
      Julian date [d].
  """
  return float(Time(time_dt, scale='tdb').jd)


def parse_time(
  time_str : str,
) -> datetime:
  """
  Parse a time string into a datetime object.
  
  Accepted formats include:
  - ISO 8601 with 'T' separator: "2025-10-01T00:00:00"
  - ISO 8601 with 'Z' suffix: "2025-10-01T00:00:00Z"
  - Space-separated: "2025-10-01 00:00:00"
  - With microseconds: "2025-10-01 00:00:00.123456"
  
  Input:
  ------
    time_str : str
      Time string to parse.
      
  Output:
  -------
    datetime
      Parsed datetime object.
  """
  if time_str.endswith('Z'):
    time_str = time_str[:-1]

  try:
    return datetime.fromisoformat(time_str)
  except ValueError:
    formats = [
      "%Y-%m-%d %H:%M:%S",
      "%Y-%m-%d %H:%M:%S.%f",
    ]
    for fmt in formats:
      try:
        return datetime.strptime(time_str, fmt)
      except ValueError:
        continue
    raise ValueError(f"Cannot parse time string: {time_str}")
