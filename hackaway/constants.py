# fest-backend/hackaway/constants.py
"""
Compiled-in HackAway problem statements.

ProblemStatementSetting rows are sparse overrides of these; a track with
no row uses the values below and is open for registration.
"""

DEFAULT_MAX_PARTICIPANTS = 10

DEFAULT_PROBLEM_STATEMENTS = [
    {"id": 1, "title": "The Reviewer Who Never Sleeps", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 2, "title": "Seeing the World with One Sensor", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 3, "title": "Finding the Way, One Step at a Time", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 4, "title": "Glove-Controlled Drift Racer: Master Every Move!", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 5, "title": "TrekBot – A Simple Quadruped Walking Robot", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 6, "title": "ChordMate – Never Play the Wrong Chord Again!", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 7, "title": "Drip-Sync: No More Guesswork!", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 8, "title": "Automated Railway Track Fault Detector", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 9, "title": "Agentic AI for Intelligent Personal Financial Decision-Making", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 10, "title": "RescueNet – Every Minute Knows Where to Go", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 11, "title": "Salil's Inbox – Signal, Not Noise", "max_participants": DEFAULT_MAX_PARTICIPANTS},
    {"id": 12, "title": "Multi-Modal Severity Quantifier", "max_participants": DEFAULT_MAX_PARTICIPANTS},
]

PROBLEM_STATEMENT_IDS = [ps["id"] for ps in DEFAULT_PROBLEM_STATEMENTS]

DEFAULTS_BY_ID = {ps["id"]: ps for ps in DEFAULT_PROBLEM_STATEMENTS}

# First key of pg_advisory_xact_lock(int, int); the second is the track number
CAPACITY_LOCK_NAMESPACE = 0x4841
