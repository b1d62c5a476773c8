"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCHOOL_TIMEZONE = "Asia/Kuala_Lumpur"

DEFAULT_CHECKIN_EARLIEST = "05:00"
DEFAULT_CHECKIN_LATE = "07:30"
DEFAULT_CHECKIN_LATEST = "09:00"

BARCODE_PREFIX = "SMK"

ORDINARY_CLASSES = ("Advance", "Brilliant", "Creative", "Dynamic", "Excellent", "Generous", "Honest")
SIXTH_FORM_CLASSES = ("Science", "Arts")

# form -> (display name, classes)
DEFAULT_FORMS = {
    1: ("Form 1", ORDINARY_CLASSES),
    2: ("Form 2", ORDINARY_CLASSES),
    3: ("Form 3", ORDINARY_CLASSES),
    4: ("Form 4", ORDINARY_CLASSES),
    5: ("Form 5", ORDINARY_CLASSES),
    6: ("Lower Six", SIXTH_FORM_CLASSES),
    7: ("Upper Six", SIXTH_FORM_CLASSES),
}

# Used when generating student IDs (YYYY + form + letter + sequence).
CLASS_LETTERS = {
    "Advance": "A",
    "Brilliant": "B",
    "Creative": "C",
    "Dynamic": "D",
    "Excellent": "E",
    "Generous": "F",
    "Honest": "G",
    "Science": "S",
    "Arts": "R",
}
UNKNOWN_CLASS_LETTER = "X"
