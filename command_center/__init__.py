# Command Center: task board state, persistence and rendering
#
# Components:
#   schema.py   - Data model (Task, ActivityEntry, Snapshot, TaskStatus, Priority)
#   storage.py  - SQLite key-value storage for the local backend
#   client.py   - HTTP client for the remote task API
#   adapters.py - Persistence adapters (local blob / remote API)
#   store.py    - TaskStore: task lifecycle, activity log, change events
#   render.py   - Pure projection from store state to a board view
#   mission.py  - Static mission statement, tabs, clock
#   config.py   - YAML + environment configuration
