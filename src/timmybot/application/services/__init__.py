"""Application services: access control, guild queues, and playback coordination."""
