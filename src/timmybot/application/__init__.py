"""
Application Layer

Contains the command pipeline, command/query handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- dispatch/: Invocation normalization, command catalog, cooldowns, and the dispatcher
- commands/: Handlers for commands that change state (play, skip, clear, join, leave)
- queries/: Handlers for read-only commands (current, queue)
- services/: Access control, the guild queue manager, and playback coordination
- interfaces/: Port interfaces for infrastructure adapters
"""
