import os

from dotenv import load_dotenv

load_dotenv()

# Google Sheets
SPREADSHEET_ID = os.environ.get("SPREADSHEET_ID", "1Z-odT9UxUyc11bWDYehgKTthxdOD_VHGoQ_2A8nc3FE")
GOOGLE_CREDENTIALS_FILE = os.environ.get("GOOGLE_CREDENTIALS_FILE", "credentials.json")
GOOGLE_CLIENT_EMAIL = os.environ.get("GOOGLE_CLIENT_EMAIL", "")
GOOGLE_PRIVATE_KEY = os.environ.get("GOOGLE_PRIVATE_KEY", "")

# Sheet names (must match the tabs exactly)
PICKS_SHEET = "Picks"
USERS_SHEET = "Users"
META_SHEET = "Meta"
RESULTS_SHEET = "Results"

# Discord
BOT_TOKEN = os.environ.get("BOT_TOKEN", "")
GUILD_ID = int(os.environ.get("GUILD_ID") or "1418861060294705154")

# HockeyTech schedule feed (WHL = league 1)
FEED_BASE_URL = "https://lscluster.hockeytech.com/feed/"
FEED_LEAGUE_ID = int(os.environ.get("FEED_LEAGUE_ID") or "1")
FEED_KEY = os.environ.get("FEED_KEY", "public")

# Timeouts for every external call, in seconds
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT") or "30")

# Scheduler — hours are local to TIMEZONE, windows are [start, end)
TIMEZONE = os.environ.get("TIMEZONE", "America/Edmonton")
INSERT_WINDOW = (8, 10)     # morning: add today's scheduled games
UPDATE_WINDOW = (22, 1)     # night: write final scores, wraps past midnight
POLL_MINUTES = 5

# When a fetched game counts as finished:
#   "status" = feed game_status starts with "Final" (a 0-0 game in progress stays Scheduled)
#   "goals"  = both goal counts reported
TERMINAL_POLICY = os.environ.get("TERMINAL_POLICY", "status")
