import os

# Default is a private in-memory SQLite database; point this at a file to keep data.
DATABASE_URL = os.getenv("GYMDESK_DATABASE_URL", "sqlite://")

SESSION_FILE = os.getenv("GYMDESK_SESSION_FILE", ".gymdesk_session.json")
SESSION_KEY = "gym_user"

# Artificial pause before resolving credentials at login, in seconds.
LOGIN_DELAY = float(os.getenv("GYMDESK_LOGIN_DELAY", "1.0"))

MONTHLY_FEE = float(os.getenv("GYMDESK_MONTHLY_FEE", "50"))

LOG_LEVEL = os.getenv("GYMDESK_LOG_LEVEL", "INFO")
