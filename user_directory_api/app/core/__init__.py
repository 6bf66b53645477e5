"""Settings, logging, database and security helpers shared by the app."""
