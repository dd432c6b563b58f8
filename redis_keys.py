LOBBY_META_PREFIX = "lobby:meta:"
LOBBY_META_KEY = LOBBY_META_PREFIX + "{name}" # lobby name - hash of lobby fields
LOBBY_PLAYERS_KEY = "lobby:players:{name}" # lobby name - sorted set of member ids scored by join time
SESSION_KEY = "session:{token}" # session token - hash written by the login service

# **Example `lobby:meta:{name}` hash fields**
# - `name` = lobby name (kept in sync on rename)
# - `owner` = steamid of the creator
# - `created_at` = ISO timestamp
# - `password` = base64 sha256 digest (absent when the lobby is unsecured)

# **Example `session:{token}` hash fields**
# - `steamid` = stable account id
# - `username` = display name (optional)
