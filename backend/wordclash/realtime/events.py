"""Socket.IO event names shared by the handlers and the game service."""

LOBBY_CHANNEL = "lobby"

# Inbound
JOIN_LOBBY = "join-lobby"
LIST_ROOMS = "list-rooms"
CREATE_ROOM = "create-room"
JOIN_ROOM = "join-room"
LEAVE_ROOM = "leave-room"
START_GAME = "start-game"
UPDATE_ROOM_SETTINGS = "update-room-settings"
TYPE_WORD = "type-word"
SUBMIT_WORD = "submit-word"
CHANGE_TEAM = "change-team"

# Outbound
LOBBY_JOINED = "lobby-joined"
AVAILABLE_ROOMS = "available-rooms"
ROOM_LIST_UPDATED = "room-list-updated"
ROOM_CREATED = "room-created"
ROOM_JOINED = "room-joined"
JOIN_ERROR = "join-error"
ROOM_ERROR = "room-error"
PLAYER_JOINED = "player-joined"
PLAYER_LEFT = "player-left"
GAME_STARTING = "game-starting"
GAME_STARTED = "game-started"
TIMER_UPDATE = "timer-update"
CARD_CLAIMED = "card-claimed"
ROOM_SETTINGS_UPDATED = "room-settings-updated"
TEAMS_UPDATED = "teams-updated"
GAME_END = "game-end"
