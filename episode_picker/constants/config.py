"""Tunable defaults and third-party service constants."""

import os

# Couch Potato mode
DEFAULT_COUCH_POTATO_DURATION = 360  # 6 hours, in minutes
DEFAULT_RUNTIME = 30  # Used when a metadata source has no runtime for an episode

# Backup format
BACKUP_VERSION = 1

# TVmaze (show and episode metadata)
TVMAZE_BASE_URL = "https://api.tvmaze.com"

# TMDB (streaming availability, powered by JustWatch)
TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_API_KEY = os.environ.get("TMDB_API_KEY")
TMDB_WATCH_REGION = "US"

MAX_CONCURRENT_REQUESTS = 10
REQUEST_TIMEOUT_SECONDS = 30

# Custom services get this badge color unless one is given
DEFAULT_CUSTOM_SERVICE_COLOR = "#8B5CF6"

# Built-in streaming services: (id, display name, badge color)
STREAMING_SERVICES = [
    ("netflix", "Netflix", "#E50914"),
    ("hulu", "Hulu", "#1CE783"),
    ("prime", "Prime Video", "#00A8E1"),
    ("disney", "Disney+", "#113CCF"),
    ("hbo", "Max (HBO)", "#5822B4"),
    ("peacock", "Peacock", "#000000"),
    ("paramount", "Paramount+", "#0064FF"),
    ("apple", "Apple TV+", "#555555"),
    ("showtime", "Showtime", "#FF0000"),
    ("starz", "Starz", "#000000"),
    ("amc", "AMC+", "#1E88E5"),
    ("discovery", "Discovery+", "#0033A0"),
    ("espn", "ESPN+", "#FF4747"),
    ("tubi", "Tubi", "#FA382F"),
    ("pluto", "Pluto TV", "#000000"),
    ("crunchyroll", "Crunchyroll", "#F47521"),
    ("network", "Network TV", "#666666"),
    ("cable", "Cable TV", "#666666"),
]

# TMDB watch-provider IDs -> internal service IDs
TMDB_PROVIDER_MAP = {
    8: "netflix",
    15: "hulu",
    384: "hbo",
    9: "prime",
    337: "disney",
    350: "apple",
    531: "paramount",
    386: "peacock",
    37: "showtime",
    43: "starz",
    526: "amc",
    520: "discovery",
    2077: "discovery",  # alternate Discovery+ ID
    73: "tubi",
    300: "pluto",
    283: "crunchyroll",
    1899: "espn",
}
