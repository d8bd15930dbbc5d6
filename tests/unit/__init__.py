"""Unit tests for individual components in isolation.

Coverage:
    - session/: Timeline, attachments, avatar resolution, reveal pacing,
      send orchestration and background scheduling
    - storage/: Image cache and theme preference
    - config: ClientConfig validation and loading

The conversation client is replaced with AsyncMock where needed, and sleeps
are recorded instead of waited.
"""
