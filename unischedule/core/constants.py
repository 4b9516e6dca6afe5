# unischedule/core/constants.py

# --- Source Document Selectors ---
# Every schedule table in the export carries an id like "table_12"
SCHEDULE_TABLE_SELECTOR = 'table[id^="table_"]'
# Header cell spanning several columns that holds the main group label
MAIN_GROUP_HEADER_SELECTOR = "thead th[colspan]"
DAY_HEADER_SELECTOR = "thead th.xAxis"
TIME_HEADER_CLASS = "yAxis"
DETAIL_TABLE_SELECTOR = "table.detailed"

# Lines the export uses to mark an empty slot
EMPTY_CELL_MARKERS = ("-x-", "---")

# --- Parsing Defaults ---
UNKNOWN_LABEL = "Unknown"
DEFAULT_TITLE = "Session"

# Each body row of the grid is one slot of this many minutes.
# The exports seen so far all use one-hour rows.
SLOT_MINUTES = 60

# --- Weekday Orderings ---
# Display/merge order, week starts on Monday.
DISPLAY_DAY_ORDER = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Calendar day numbering used for the first-occurrence search (Sunday=0).
# Kept separate from DISPLAY_DAY_ORDER on purpose.
CALENDAR_DAY_INDEX = {
    "Sunday": 0,
    "Monday": 1,
    "Tuesday": 2,
    "Wednesday": 3,
    "Thursday": 4,
    "Friday": 5,
    "Saturday": 6,
}
CALENDAR_FALLBACK_DAY_INDEX = 1  # Monday

# --- Calendar Output ---
CALENDAR_PRODID = "-//UniSchedule//Timetable//EN"
CALENDAR_VERSION = "2.0"
CALENDAR_SCALE = "GREGORIAN"
UID_DOMAIN = "unischedule"

# --- Semester Defaults ---
DEFAULT_SEMESTER_START = "2026-01-19"
DEFAULT_SEMESTER_END = "2026-05-30"
DEFAULT_DATASET_PATH = "data/timetables.json"

# --- Group Metadata Defaults ---
# Parent group labels look like "Y2.S2.WD.SE" (year.semester.mode.specialization)
DEFAULT_SEMESTER = "S1"
DEFAULT_MODE = "WE"
DEFAULT_SPECIALIZATION = "GEN"
MODE_LABELS = {
    "WE": "Weekend",
    "WD": "Weekday",
}
