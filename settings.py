from pathlib import Path

# OAuth configuration (hardcoded - not user configurable)
# X OAuth 2.0 with PKCE: twitter.com for authorization, api.twitter.com for token exchange
AUTHORIZE_URL = "https://twitter.com/i/oauth2/authorize"
TOKEN_URL = "https://api.twitter.com/2/oauth2/token"
REDIRECT_URI = "http://localhost:3000/callback"
# offline.access is what makes the token endpoint hand back a refresh token
SCOPES = ["bookmark.read", "tweet.read", "users.read", "offline.access"]

# X API v2
API_BASE = "https://api.x.com"
STATUS_URL_TEMPLATE = "https://x.com/i/web/status/{id}"
BOOKMARKS_PAGE_SIZE = 100
BOOKMARK_TWEET_FIELDS = "created_at,text"

# Relevance scoring
ALERT_THRESHOLD = 2
MAX_PROJECT_KEYWORDS = 10

# Default locations (overridable through ConfigLoader)
ENV_FILE = str(Path.home() / ".config" / "env" / "global.env")
DATA_DIR = "~/.x-bookmarks"
ACTIVE_PROJECTS_FILE = "~/clawd/memory/active-projects.md"
SEEN_FILE_NAME = "seen-bookmarks.json"
ALERTS_FILE_NAME = "bookmark-alerts.json"

# Debug log written when --debug is passed
DEBUG_LOG_FILE = "x_bookmarks_debug.log"
